"""Rule preset registry. Each named exclusion rule is a function registered via decorator.

Usage:
    @rule(name="noRepeat", description="Never pick the previous vertex twice in a row")
    def no_repeat(previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
        ...

Adding a preset = one decorated function in ``presets.py``. Lookup by name is
case-insensitive; the registered spelling is what gets reported.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ngonchaos.errors import UnknownRule

logger = logging.getLogger(__name__)

# (previous vertex or None, history most-recent first, N) -> allowed indices
RuleFn = Callable[[int | None, tuple[int, ...], int], Iterable[int]]


@dataclass(frozen=True)
class RuleSpec:
    name: str
    fn: RuleFn
    description: str = ""


class RuleRegistry:
    """Registry of named selection presets."""

    def __init__(self) -> None:
        self._rules: dict[str, RuleSpec] = {}

    def register(self, spec: RuleSpec) -> None:
        key = spec.name.lower()
        if key in self._rules:
            raise ValueError(f"Duplicate rule name: {spec.name}")
        self._rules[key] = spec
        logger.debug("Registered rule preset %s", spec.name)

    def get(self, name: str) -> RuleSpec:
        if name not in self:
            raise UnknownRule(f"Unknown rule: {name!r} (known: {', '.join(self.names())})")
        return self._rules[name.strip().lower()]

    def names(self) -> list[str]:
        return [s.name for s in self.all()]

    def all(self) -> list[RuleSpec]:
        return sorted(self._rules.values(), key=lambda s: s.name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._rules

    @property
    def count(self) -> int:
        return len(self._rules)


# Module-level singleton
_registry = RuleRegistry()


def get_registry() -> RuleRegistry:
    return _registry


def rule(*, name: str, description: str = ""):
    """Decorator to register a rule preset."""

    def decorator(fn: RuleFn) -> RuleFn:
        _registry.register(RuleSpec(name=name, fn=fn, description=description))
        return fn

    return decorator
