"""Request Context - tests for deadline and cancellation signals."""

from lazyrest.core.context import RequestContext
import lazyrest.core.context as context_module


def test_no_timeout_means_no_deadline(make_request):
    ctx = RequestContext(make_request())
    assert ctx.deadline is None
    assert ctx.time_remaining() is None
    assert not ctx.deadline_exceeded()


def test_deadline_counts_down(make_request, monkeypatch):
    now = [100.0]
    monkeypatch.setattr(context_module, "monotonic", lambda: now[0])
    ctx = RequestContext(make_request(), timeout_seconds=5)
    assert ctx.time_remaining() == 5.0

    now[0] = 103.0
    assert ctx.time_remaining() == 2.0
    assert not ctx.deadline_exceeded()

    now[0] = 110.0
    assert ctx.time_remaining() == 0.0
    assert ctx.deadline_exceeded()


async def test_cancelled_after_deadline(make_request, monkeypatch):
    now = [0.0]
    monkeypatch.setattr(context_module, "monotonic", lambda: now[0])
    ctx = RequestContext(make_request(), timeout_seconds=1)
    now[0] = 2.0
    assert await ctx.is_cancelled()


async def test_cancelled_when_client_disconnects(make_request):
    async def receive():
        return {"type": "http.disconnect"}

    ctx = RequestContext(make_request(receive=receive))
    assert await ctx.is_cancelled()


async def test_not_cancelled_while_client_connected(make_request):
    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    ctx = RequestContext(make_request(receive=receive))
    assert not await ctx.is_cancelled()
