"""Member tables snapshotted from candidate types, and member resolution."""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, Union

from .errors import ConfigurationError, MemberAccessError
from .signature import SignatureDescriptor, describe, unwrap, validate_signature

logger = logging.getLogger(__name__)


class MemberKind(str, Enum):
    FUNCTION = "function"
    STATIC = "staticmethod"
    CLASS = "classmethod"
    INSTANCE = "method"
    ATTRIBUTE = "attribute"

    @property
    def has_receiver(self) -> bool:
        return self in (MemberKind.CLASS, MemberKind.INSTANCE)


@dataclass(frozen=True)
class Member:
    """One entry of a member table.

    ``name`` is the attribute name as stored in the owner's namespace, which
    for private class members is the mangled ``_Owner__name`` form.
    """

    name: str
    owner: Any
    raw: Any
    kind: MemberKind

    @classmethod
    def classify(cls, owner: Any, name: str, raw: Any) -> "Member":
        if isinstance(raw, staticmethod):
            kind = MemberKind.STATIC
        elif isinstance(raw, classmethod):
            kind = MemberKind.CLASS
        elif inspect.isclass(owner) and inspect.isfunction(raw):
            kind = MemberKind.INSTANCE
        elif callable(raw) and not isinstance(raw, property):
            kind = MemberKind.FUNCTION
        else:
            kind = MemberKind.ATTRIBUTE
        return cls(name=name, owner=owner, raw=raw, kind=kind)

    @classmethod
    def of(cls, owner: Any, operation: Any) -> "Member":
        """Locate ``operation`` (a callable or a member name) inside ``owner``."""

        if isinstance(operation, str):
            if owner is None:
                raise ConfigurationError(f"Cannot look up '{operation}' without an owner")
            matches = MemberTable.from_type(owner).named(operation)
            if not matches:
                raise ConfigurationError(f"'{operation}' is not a member of {owner!r}")
            return matches[0]
        if owner is None:
            return cls(name=getattr(operation, "__name__", ""), owner=None, raw=operation, kind=MemberKind.FUNCTION)
        target = getattr(unwrap(operation), "__func__", unwrap(operation))
        for attr, raw in vars(owner).items():
            if raw is operation or unwrap(raw) is target:
                return cls.classify(owner, attr, raw)
        name = getattr(operation, "__name__", None)
        if name and hasattr(owner, name):
            return cls.classify(owner, name, inspect.getattr_static(owner, name))
        raise ConfigurationError(f"{operation!r} is not a member of {owner!r}")

    @property
    def plain_name(self) -> str:
        """Name with class-private mangling undone."""

        owner_name = getattr(self.owner, "__name__", "")
        prefix = f"_{owner_name.lstrip('_')}__"
        if inspect.isclass(self.owner) and owner_name and self.name.startswith(prefix):
            return "__" + self.name[len(prefix):]
        return self.name

    @property
    def public(self) -> bool:
        return not self.plain_name.startswith("_")

    @property
    def invocable(self) -> bool:
        return self.kind is not MemberKind.ATTRIBUTE

    @property
    def function(self) -> Any:
        return unwrap(self.raw)

    def qualified_name(self) -> str:
        owner_name = getattr(self.owner, "__qualname__", None) or getattr(self.owner, "__name__", None)
        return f"{owner_name}.{self.plain_name}" if owner_name else self.plain_name

    def signature(self) -> SignatureDescriptor:
        if not self.invocable:
            raise MemberAccessError(self.plain_name, f"{self.kind.value} is not callable")
        return describe(self.function, name=self.plain_name, receiver=self.kind.has_receiver)

    def try_signature(self) -> Optional[SignatureDescriptor]:
        try:
            return self.signature()
        except ConfigurationError as exc:
            logger.debug("no signature for %s: %s", self.qualified_name(), exc)
            return None

    def bind(self) -> Callable[..., Any]:
        """Return a callable ready to receive the positional arguments.

        Instance methods are bound to a fresh instance of the owner created
        without arguments.
        """

        if self.kind is MemberKind.INSTANCE:
            return self.raw.__get__(self.owner(), self.owner)
        if self.kind is MemberKind.CLASS:
            return self.raw.__get__(None, self.owner)
        if self.kind is MemberKind.STATIC:
            return self.raw.__func__
        if self.kind is MemberKind.ATTRIBUTE:
            raise MemberAccessError(self.plain_name, f"{self.kind.value} is not callable")
        return self.raw


class MemberTable:
    """Fixed snapshot of the members declared by a class or module."""

    def __init__(self, owner: Any, members: Iterable[Member]) -> None:
        self._owner = owner
        self._members: Tuple[Member, ...] = tuple(members)

    @classmethod
    def from_type(cls, target: Any) -> "MemberTable":
        """Snapshot the members ``target`` declares itself (not inherited ones)."""

        if isinstance(target, MemberTable):
            return target
        try:
            namespace = dict(vars(target))
        except TypeError as exc:
            raise ConfigurationError(f"{target!r} has no member namespace to inspect") from exc
        members = [
            Member.classify(target, name, raw)
            for name, raw in namespace.items()
            if not _is_dunder(name)
        ]
        return cls(target, members)

    @classmethod
    def from_callables(
        cls,
        owner: Any,
        entries: Iterable[Union[Callable[..., Any], Tuple[str, Callable[..., Any]]]],
    ) -> "MemberTable":
        """Build an explicit registration table; names may repeat (overloads)."""

        members: list[Member] = []
        for entry in entries:
            if isinstance(entry, tuple):
                name, func = entry
            else:
                name, func = getattr(entry, "__name__", ""), entry
            if not name:
                raise ConfigurationError(f"Cannot register {entry!r} without a name")
            members.append(Member.classify(None, name, func))
        return cls(owner, members)

    @property
    def owner(self) -> Any:
        return self._owner

    def named(self, name: str) -> Tuple[Member, ...]:
        return tuple(member for member in self._members if member.plain_name == name)

    def names(self) -> Tuple[str, ...]:
        return tuple(member.plain_name for member in self._members)

    def __contains__(self, name: object) -> bool:
        return any(member.plain_name == name for member in self._members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)


def resolve_member(table: MemberTable, name: str, descriptor: SignatureDescriptor) -> Optional[Member]:
    """Pick the member named ``name`` that best matches ``descriptor``.

    Among same-named members the first with matching parameter types wins;
    otherwise the first name match is returned so that a wrong signature can
    still be reported.
    """

    candidates = table.named(name)
    for member in candidates:
        if validate_signature(member, descriptor):
            return member
    return candidates[0] if candidates else None


def ensure_access(member: Member, *, allow_private: bool = True) -> None:
    """Raise ``MemberAccessError`` unless ``member`` may be invoked."""

    if not member.invocable:
        raise MemberAccessError(member.plain_name, f"{member.kind.value} is not callable")
    if not member.public and not allow_private:
        raise MemberAccessError(member.plain_name, "member is private and private access is disabled")


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")
