"""Error kinds raised by the chaos-game engine. All of them abort the run."""

from __future__ import annotations


class ChaosGameError(ValueError):
    """Base class. ``kind`` is the stable name reported by the API."""

    kind = "ChaosGameError"


class InvalidN(ChaosGameError):
    kind = "InvalidN"


class InvalidRatio(ChaosGameError):
    kind = "InvalidRatio"


class UnknownRule(ChaosGameError):
    kind = "UnknownRule"


class InvalidRuleFcnResult(ChaosGameError):
    kind = "InvalidRuleFcnResult"


class InvalidParameter(ChaosGameError):
    kind = "InvalidParameter"


class EmptyAllowedSet(ChaosGameError):
    """A selection step left no vertex to choose from.

    Only detectable mid-run, so the step number and the previous vertex are
    kept for the report.
    """

    kind = "EmptyAllowedSet"

    def __init__(self, n: int, step: int | None = None, previous: int | None = None) -> None:
        self.n = n
        self.step = step
        self.previous = previous
        where = f" at step {step}" if step is not None else ""
        super().__init__(
            f"Exclusion rule produced an empty allowed set (N={n}, previous={previous}){where}"
        )
