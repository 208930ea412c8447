import pytest

from methodcheck import bootstrap


@pytest.fixture(scope="session", autouse=True)
def setup_methodcheck() -> None:
    """Load plugin generators once for the entire test session."""

    bootstrap()
