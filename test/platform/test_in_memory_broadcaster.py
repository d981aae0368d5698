import anyio
import pytest

from src.platform.event.in_memory_broadcaster import InMemoryBroadcasterImpl


@pytest.mark.unit
class TestInMemoryBroadcaster:
    @pytest.mark.asyncio
    async def test_fan_out_to_all_subscribers(self) -> None:
        broadcaster: InMemoryBroadcasterImpl[int] = InMemoryBroadcasterImpl(name='test')
        first = broadcaster.subscribe()
        second = broadcaster.subscribe()

        broadcaster.publish(1)

        with anyio.fail_after(1):
            assert await first.receive() == 1
            assert await second.receive() == 1

    def test_publish_without_subscribers_is_noop(self) -> None:
        InMemoryBroadcasterImpl[int](name='test').publish(1)

    def test_full_stream_drops_newest(self) -> None:
        broadcaster: InMemoryBroadcasterImpl[int] = InMemoryBroadcasterImpl(
            name='test', max_buffer_size=2
        )
        stream = broadcaster.subscribe()

        for i in range(5):
            broadcaster.publish(i)

        assert stream.receive_nowait() == 0
        assert stream.receive_nowait() == 1
        with pytest.raises(anyio.WouldBlock):
            stream.receive_nowait()

    def test_closed_subscriber_is_pruned(self) -> None:
        broadcaster: InMemoryBroadcasterImpl[int] = InMemoryBroadcasterImpl(name='test')
        stream = broadcaster.subscribe()
        broadcaster.subscribe()

        stream.close()
        broadcaster.publish(1)

        assert broadcaster.subscriber_count == 1

    def test_unsubscribe_closes_stream(self) -> None:
        broadcaster: InMemoryBroadcasterImpl[int] = InMemoryBroadcasterImpl(name='test')
        stream = broadcaster.subscribe()

        broadcaster.unsubscribe(stream)

        assert broadcaster.subscriber_count == 0
        with pytest.raises(anyio.ClosedResourceError):
            stream.receive_nowait()
