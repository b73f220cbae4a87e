"""Error types surfaced by the try-on and size-fit pipelines.

Every orchestration call ends in either a success value or exactly one of
these. ``stage`` is filled in by the orchestrator that was running when the
error was raised, so callers can report where things stopped.
"""


class FittingRoomError(Exception):
    """Base class for all pipeline failures."""

    kind = "error"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class MissingInput(FittingRoomError):
    """A precondition was violated before any capability call was issued."""

    kind = "missing_input"


class AnalysisFailed(FittingRoomError):
    """A text or structured analysis call failed or returned unusable output."""

    kind = "analysis_failed"


class NoImageProduced(FittingRoomError):
    """The synthesis call succeeded but its reply carried no inline image."""

    kind = "no_image_produced"

    def __init__(self, message: str, explanation: str = "", stage: str | None = None):
        super().__init__(message, stage=stage)
        self.explanation = explanation

    def __str__(self) -> str:
        if self.explanation:
            return f"{self.message} Model response: {self.explanation}"
        return self.message


class CapabilityUnavailable(FittingRoomError):
    """The inference capability cannot be reached at all (e.g. no API key)."""

    kind = "capability_unavailable"


class CapabilityCallFailed(FittingRoomError):
    """A single capability call failed at the transport or SDK level."""

    kind = "capability_call_failed"
