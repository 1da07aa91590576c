"""Request Context - cancellable, request-scoped handle passed to every service call.

Invariants:
    - One RequestContext per inbound request, created by the dispatcher
    - is_cancelled() is True once the client disconnected or the deadline passed
    - The deadline is advisory: the dispatcher never interrupts a running call
"""

from time import monotonic

from starlette.requests import Request


class RequestContext:
    """Cancellation and deadline signal for one request."""

    def __init__(self, request: Request, timeout_seconds: float | None = None):
        self.request = request
        self.started_at = monotonic()
        self.deadline = (
            self.started_at + timeout_seconds if timeout_seconds else None
        )

    def time_remaining(self) -> float | None:
        """Seconds until the deadline, None when no deadline is set."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - monotonic())

    def deadline_exceeded(self) -> bool:
        return self.deadline is not None and monotonic() >= self.deadline

    async def is_cancelled(self) -> bool:
        """True when the caller went away or the deadline passed."""
        if self.deadline_exceeded():
            return True
        return await self.request.is_disconnected()

    def __repr__(self) -> str:
        return (
            f"RequestContext(path={self.request.url.path!r}, "
            f"deadline={self.deadline!r})"
        )
