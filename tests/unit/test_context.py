from conftest import FakeClient
from core.context import build_context


class TestBuildContext:
    def test_wires_shared_state(self):
        client = FakeClient(running=False)
        scheduled = []
        ctx = build_context(
            post=lambda fn: fn(),
            schedule=lambda delay, fn: scheduled.append(delay),
            client=client,
            submit=lambda fn: fn(),
        )

        assert ctx.poller.state is ctx.state
        assert ctx.seek.state is ctx.state

        ctx.seek.release(12.0)
        assert client.commands == [("seek", 12.0)]
        assert scheduled == [0.5]

        ctx.close()
        assert ctx.poller.closed
        assert client.shut_down
