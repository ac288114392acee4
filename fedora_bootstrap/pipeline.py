from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Sequence

from .errors import MissingDependency, PipelineAborted

if TYPE_CHECKING:
    from .context import StepContext

logger = logging.getLogger(__name__)

DISABLED_BY_CONFIG = "disabled by configuration"


class FailurePolicy(enum.Enum):
    """What a failing step means for the rest of the run."""

    FATAL = "fatal"
    WARN_AND_CONTINUE = "warn"
    SILENT_SKIP = "silent"


class Outcome(enum.Enum):
    ALREADY_SATISFIED = "already_satisfied"
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    step_id: str
    outcome: Outcome
    reason: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def satisfied(cls, step_id: str, reason: Optional[str] = None) -> "StepResult":
        return cls(step_id, Outcome.ALREADY_SATISFIED, reason=reason)

    @classmethod
    def applied(cls, step_id: str, reason: Optional[str] = None) -> "StepResult":
        return cls(step_id, Outcome.APPLIED, reason=reason)

    @classmethod
    def skipped(cls, step_id: str, reason: str) -> "StepResult":
        return cls(step_id, Outcome.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, step_id: str, error: str) -> "StepResult":
        return cls(step_id, Outcome.FAILED, error=error)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "step": self.step_id,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "error": self.error,
        }


class Step(Protocol):
    """A single idempotent step.

    check() inspects the system and returns a result when nothing needs to
    change (already satisfied, or skipped by configuration). Returning None
    means apply() must run.
    """

    step_id: str
    policy: FailurePolicy

    def check(self, ctx: "StepContext") -> Optional[StepResult]:
        ...

    def apply(self, ctx: "StepContext") -> StepResult:
        ...


@dataclass
class PipelineResult:
    results: List[StepResult] = field(default_factory=list)

    def by_id(self, step_id: str) -> Optional[StepResult]:
        for r in self.results:
            if r.step_id == step_id:
                return r
        return None

    def count(self, outcome: Outcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def failed(self) -> List[StepResult]:
        return [r for r in self.results if r.outcome == Outcome.FAILED]


def _log_result(result: StepResult) -> None:
    if result.outcome == Outcome.ALREADY_SATISFIED:
        logger.info("%s: already satisfied%s", result.step_id, f" ({result.reason})" if result.reason else "")
    elif result.outcome == Outcome.APPLIED:
        logger.info("%s: applied%s", result.step_id, f" ({result.reason})" if result.reason else "")
    elif result.outcome == Outcome.SKIPPED:
        logger.info("%s: skipped (%s)", result.step_id, result.reason)


def _run_step(step: Step, ctx: "StepContext", *, dry_run: bool) -> StepResult:
    result = step.check(ctx)
    if result is not None:
        return result
    if dry_run:
        return StepResult.skipped(step.step_id, "dry run: changes pending")
    logger.info("Running step %s", step.step_id)
    return step.apply(ctx)


def run_pipeline(
    *,
    steps: Sequence[Step],
    ctx: "StepContext",
    dry_run: bool = False,
) -> PipelineResult:
    """Run every step once, in order, classifying failures by step policy.

    Raises PipelineAborted when a FATAL step fails; no later step runs.
    """

    out = PipelineResult()

    for step in steps:
        try:
            result = _run_step(step, ctx, dry_run=dry_run)
        except MissingDependency as e:
            if step.policy == FailurePolicy.FATAL:
                logger.error("%s", e)
                raise PipelineAborted(step.step_id, e, out.results) from e
            if step.policy == FailurePolicy.SILENT_SKIP:
                logger.debug("%s: %s", step.step_id, e)
            else:
                logger.warning("%s", e)
            result = StepResult.skipped(step.step_id, str(e))
        except Exception as e:
            if step.policy == FailurePolicy.FATAL:
                logger.error("%s", e)
                raise PipelineAborted(step.step_id, e, out.results) from e
            logger.warning("%s failed: %s", step.step_id, e)
            result = StepResult.failed(step.step_id, str(e))
        else:
            _log_result(result)

        ctx.results[step.step_id] = result
        out.results.append(result)

    return out
