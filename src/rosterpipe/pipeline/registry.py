"""Named capabilities and pipeline specifications.

Selectors, transforms and sinks can be registered under a name with the
``@selector``, ``@transform`` and ``@sink`` decorators, then referenced by
name when building a ``PipelineSpec`` (for example from configuration).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Literal

from rosterpipe.pipeline.capabilities import (
    as_selector,
    as_sink,
    as_transform,
    discard,
    identity,
)
from rosterpipe.pipeline.engine import process_elements

Role = Literal["selector", "transform", "sink"]
ROLES: tuple[Role, ...] = ("selector", "transform", "sink")

_ADAPTERS: dict[str, Callable[[Any], Callable[..., Any]]] = {
    "selector": as_selector,
    "transform": as_transform,
    "sink": as_sink,
}


@dataclass
class PipelineSpec:
    """Specification for a named pipeline.

    Attributes:
        name: Unique pipeline identifier
        selector: Predicate deciding which elements proceed
        transform: Mapping applied to accepted elements
        sink: Terminal action receiving transformed values
        description: Human-readable summary
    """

    name: str
    selector: Callable[[Any], bool]
    transform: Callable[[Any], Any] = identity
    sink: Callable[[Any], None] = discard
    description: str = ""

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PipelineSpec):
            return NotImplemented
        return self.name == other.name

    def run(self, source: Iterable[Any]) -> None:
        """Drive source through this pipeline.

        Args:
            source: Elements to process
        """
        process_elements(source, self.selector, self.transform, self.sink)


class CapabilityRegistry:
    """Registry of named selectors, transforms and sinks."""

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, Callable[..., Any]]] = {role: {} for role in ROLES}

    def _role(self, role: str) -> dict[str, Callable[..., Any]]:
        try:
            return self._entries[role]
        except KeyError:
            raise ValueError(f"Unknown capability role {role!r}; expected one of {', '.join(ROLES)}") from None

    def register(self, role: str, name: str, fn: Callable[..., Any]) -> None:
        """Register a capability under a name."""
        self._role(role)[name] = fn

    def get(self, role: str, name: str) -> Callable[..., Any]:
        """Look up a capability by name.

        Raises:
            KeyError: If no capability is registered under name
        """
        entries = self._role(role)
        if name not in entries:
            known = ", ".join(sorted(entries)) or "none"
            raise KeyError(f"No {role} registered as {name!r} (known: {known})")
        return entries[name]

    def names(self, role: str) -> list[str]:
        """Registered names for a role, sorted."""
        return sorted(self._role(role))

    def __contains__(self, item: tuple[str, str]) -> bool:
        role, name = item
        return name in self._entries.get(role, {})

    def clear(self) -> None:
        """Clear all registered capabilities (for testing).

        Built-in capabilities stay unregistered until
        ``rosterpipe.criteria.register_builtins()`` runs again.
        """
        for entries in self._entries.values():
            entries.clear()


# Global registry
_registry = CapabilityRegistry()


def get_registry() -> CapabilityRegistry:
    """Get the global capability registry."""
    return _registry


def _registering(role: Role, name: str | None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        _registry.register(role, name or fn.__name__, fn)
        return fn

    return decorator


def selector(name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to register a function as a named selector.

    Example:
        @selector()
        def adult(person: Person) -> bool:
            return person.age >= 18
    """
    return _registering("selector", name)


def transform(name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to register a function as a named transform."""
    return _registering("transform", name)


def sink(name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to register a function as a named sink."""
    return _registering("sink", name)


def resolve_capability(role: Role, value: Any, registry: CapabilityRegistry | None = None) -> Callable[..., Any]:
    """Resolve a name, callable or single-method object for a role.

    Args:
        role: Capability role
        value: Registered name, callable, or object with the role's method
        registry: Registry to look names up in (global registry by default)

    Returns:
        Callable implementing the role
    """
    if isinstance(value, str):
        value = (registry or _registry).get(role, value)
    return _ADAPTERS[role](value)


def create_pipeline_spec(
    name: str,
    *,
    selector: Any,
    transform: Any = None,
    sink: Any = None,
    description: str = "",
    registry: CapabilityRegistry | None = None,
) -> PipelineSpec:
    """Create a PipelineSpec from names, callables or single-method objects.

    Args:
        name: Unique pipeline identifier
        selector: Selector capability or registered selector name
        transform: Transform capability or name (identity when omitted)
        sink: Sink capability or name (discard when omitted)
        description: Human-readable summary
        registry: Registry to resolve names against

    Returns:
        PipelineSpec instance
    """
    return PipelineSpec(
        name=name,
        selector=resolve_capability("selector", selector, registry),
        transform=resolve_capability("transform", transform, registry) if transform is not None else identity,
        sink=resolve_capability("sink", sink, registry) if sink is not None else discard,
        description=description,
    )
