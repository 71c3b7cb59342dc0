from __future__ import annotations


class DashboardError(Exception):
    """Base class for errors reported to the presentation layer."""

    kind = "dashboard_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class FetchError(DashboardError):
    """A repository read failed while rebuilding the snapshot."""

    kind = "fetch_error"


class MutationError(DashboardError):
    """A completion write failed.

    ``partial`` is set when an earlier write of the same action was already
    persisted, e.g. a todo was marked complete but its log entry was not
    written. Nothing is rolled back in that case.
    """

    kind = "mutation_error"

    def __init__(self, message: str, operation: str, target_id: str, partial: bool = False):
        super().__init__(message)
        self.operation = operation
        self.target_id = target_id
        self.partial = partial

    @property
    def applied(self) -> str:
        return "partial" if self.partial else "none"

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            {
                "operation": self.operation,
                "target_id": self.target_id,
                "partial": self.partial,
            }
        )
        return payload


class InvalidFrequency(DashboardError):
    kind = "invalid_frequency"

    def __init__(self, frequency):
        super().__init__(f"Unknown habit frequency: {frequency!r}")
        self.frequency = frequency
