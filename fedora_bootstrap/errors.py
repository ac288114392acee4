"""Exception types shared by the pipeline and its steps."""

from __future__ import annotations

from typing import Any, List, Sequence


class BootstrapError(RuntimeError):
    """Base class for errors raised by fedora-bootstrap."""


class ConfigError(BootstrapError, ValueError):
    """A configuration or manifest file could not be parsed."""


class MissingDependency(BootstrapError):
    """A helper command or input file is absent.

    Steps raise this for expected absence; the pipeline records the step as
    skipped instead of failed.
    """


class UnsupportedHost(BootstrapError):
    """The host is not running the supported distribution."""


class CommandError(BootstrapError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class PipelineAborted(BootstrapError):
    def __init__(self, step_id: str, error: BaseException, results: List[Any]) -> None:
        self.step_id = step_id
        self.error = error
        self.results = results
        super().__init__(f"Step {step_id} failed: {error}")
