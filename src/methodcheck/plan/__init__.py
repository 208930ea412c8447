"""Plan file loading and execution."""
from .loader import PLAN_SCHEMA, load_plan
from .models import GeneratorConfig, MethodPlan, MethodReport, SuitePlan, TargetRef, all_passed
from .runner import run_plan, select_methods

__all__ = [
    "GeneratorConfig",
    "MethodPlan",
    "MethodReport",
    "PLAN_SCHEMA",
    "SuitePlan",
    "TargetRef",
    "all_passed",
    "load_plan",
    "run_plan",
    "select_methods",
]
