"""Exception types raised by the tolerance stack engines."""

from __future__ import annotations


class ToleranceStackError(Exception):
    """Base class for all tolstack errors."""


class InvalidParameters(ToleranceStackError, ValueError):
    """Input rejected before any sampling started."""


class SamplingExhausted(ToleranceStackError):
    """Bounded rejection sampling did not converge within its attempt cap.

    Attributes:
        attempts: Number of redraw rounds performed.
        remaining: Number of values still outside the bounds.
    """

    def __init__(self, attempts: int, remaining: int) -> None:
        self.attempts = attempts
        self.remaining = remaining
        super().__init__(
            f"{remaining} sample(s) still out of bounds after {attempts} attempts"
        )


class ComputationFailed(ToleranceStackError):
    """A sampling worker raised; the run was aborted."""
