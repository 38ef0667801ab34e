"""Vertex selection: which indices may come next, and the uniform draw among them.

Three interchangeable policies share one contract::

    allowed(previous, history, n) -> sorted, de-duplicated, non-empty list in 1..N

``history`` is ordered most-recent first. ``build_policy`` picks the policy
from a config with precedence custom function > offsets > named preset; lower
sources are ignored without comment.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from ngonchaos.engine.config import SimulationConfig
# Importing presets also registers the built-in rules
from ngonchaos.engine.presets import allowed_by_offsets
from ngonchaos.engine.registry import RuleFn, RuleRegistry, RuleSpec, get_registry
from ngonchaos.errors import EmptyAllowedSet, InvalidRuleFcnResult

SOURCE_CUSTOM = "custom"
SOURCE_OFFSETS = "offsets"
SOURCE_PRESET = "preset"


@dataclass(frozen=True)
class RuleDescription:
    """The effective rule of a run, plus what else was configured."""

    source: str
    rule: str = "none"
    exclude_offsets: tuple[int, ...] = ()
    rule_fn: str | None = None
    history_length: int = 0

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "rule": self.rule,
            "exclude_offsets": list(self.exclude_offsets),
            "rule_fn": self.rule_fn,
            "history_length": self.history_length,
        }


class SelectionPolicy:
    """Base policy. Subclasses implement ``allowed``."""

    source = ""
    # Policies that never look at history let the engine skip building it
    needs_history = False

    def allowed(self, previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
        raise NotImplementedError


class PresetPolicy(SelectionPolicy):
    source = SOURCE_PRESET

    def __init__(self, spec: RuleSpec) -> None:
        self.spec = spec

    def allowed(self, previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
        return list(self.spec.fn(previous, history, n))


class OffsetExclusionPolicy(SelectionPolicy):
    source = SOURCE_OFFSETS

    def __init__(self, offsets: Iterable[int]) -> None:
        self.offsets = tuple(offsets)

    def allowed(self, previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
        return allowed_by_offsets(previous, self.offsets, n)


class CustomRulePolicy(SelectionPolicy):
    """Wraps a user function and checks every answer it gives."""

    source = SOURCE_CUSTOM
    needs_history = True

    def __init__(self, fn: RuleFn) -> None:
        self.fn = fn

    def allowed(self, previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
        return validate_allowed(self.fn(previous, history, n), n)


def validate_allowed(result: object, n: int) -> list[int]:
    """Check a custom rule's answer: non-empty finite integers within 1..N."""
    if isinstance(result, (str, bytes)):
        raise InvalidRuleFcnResult("Rule function must return integer indices, not text")
    if isinstance(result, np.ndarray):
        values = result.ravel().tolist()
    elif isinstance(result, numbers.Number):
        values = [result]
    else:
        try:
            values = list(result)  # type: ignore[arg-type]
        except TypeError as e:
            raise InvalidRuleFcnResult(
                f"Rule function must return a collection of indices, got {type(result).__name__}"
            ) from e

    if not values:
        raise InvalidRuleFcnResult("Rule function must return a non-empty collection of indices")

    indices: set[int] = set()
    for v in values:
        if isinstance(v, bool) or not isinstance(v, numbers.Real):
            raise InvalidRuleFcnResult(f"Rule function returned a non-integer index: {v!r}")
        if not math.isfinite(v) or not float(v).is_integer():
            raise InvalidRuleFcnResult(f"Rule function returned a non-integer index: {v!r}")
        indices.add(int(v))

    out_of_range = sorted(i for i in indices if i < 1 or i > n)
    if out_of_range:
        raise InvalidRuleFcnResult(f"Rule function returned indices outside 1..{n}: {out_of_range}")
    return sorted(indices)


def build_policy(config: SimulationConfig, registry: RuleRegistry | None = None) -> SelectionPolicy:
    """Pick the highest-priority configured rule source."""
    if config.rule_fn is not None:
        return CustomRulePolicy(config.rule_fn)
    if config.exclude_offsets:
        return OffsetExclusionPolicy(config.exclude_offsets)
    registry = registry or get_registry()
    return PresetPolicy(registry.get(config.rule))


def describe_rule(config: SimulationConfig, policy: SelectionPolicy) -> RuleDescription:
    rule_name = config.rule
    if isinstance(policy, PresetPolicy):
        rule_name = policy.spec.name
    fn_name = None
    if config.rule_fn is not None:
        fn_name = getattr(config.rule_fn, "__qualname__", None) or repr(config.rule_fn)
    return RuleDescription(
        source=policy.source,
        rule=rule_name,
        exclude_offsets=tuple(config.exclude_offsets),
        rule_fn=fn_name,
        history_length=config.history_length,
    )


@dataclass
class VertexChooser:
    """Binds a policy to a polygon size and a private random generator."""

    policy: SelectionPolicy
    n: int
    rng: np.random.Generator
    draws: int = field(default=0, init=False)

    def choose(self, previous: int | None, history: tuple[int, ...] = ()) -> int:
        allowed = self.policy.allowed(previous, history, self.n)
        if not allowed:
            raise EmptyAllowedSet(self.n, step=self.draws + 1, previous=previous)
        self.draws += 1
        return allowed[int(self.rng.integers(len(allowed)))]
