"""
In-memory State Broadcaster Implementation

Fan-out of state snapshots to any number of local subscribers.
"""

from typing import Generic, List, TypeVar

from anyio import BrokenResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.logging.loguru_io import Logger


T = TypeVar('T')


class InMemoryBroadcasterImpl(Generic[T]):
    """
    In-memory pub/sub

    Memory Management:
    - Stream max buffer: max_buffer_size items per subscriber
    - Drop policy: drop for that subscriber if its stream is full (send_nowait raises WouldBlock)
    - Subscribers whose receive side was closed are pruned on the next publish
    """

    def __init__(self, *, name: str, max_buffer_size: int = 10) -> None:
        self._name = name
        self._max_buffer_size = max_buffer_size
        self._subscribers: List[tuple[MemoryObjectSendStream[T], MemoryObjectReceiveStream[T]]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> MemoryObjectReceiveStream[T]:
        send_stream, receive_stream = create_memory_object_stream[T](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.append((send_stream, receive_stream))

        Logger.base.debug(
            f'📡 [BROADCASTER:{self._name}] Subscribed (total subscribers: {len(self._subscribers)})'
        )
        return receive_stream

    def publish(self, item: T) -> None:
        if not self._subscribers:
            return

        delivered = 0
        dropped = 0
        closed: List[tuple[MemoryObjectSendStream[T], MemoryObjectReceiveStream[T]]] = []

        for pair in self._subscribers:
            send_stream, _ = pair
            try:
                send_stream.send_nowait(item)
                delivered += 1
            except WouldBlock:
                # Slow consumer
                dropped += 1
                Logger.base.warning(f'⚠️ [BROADCASTER:{self._name}] Stream full, dropping item')
            except BrokenResourceError:
                closed.append(pair)

        for pair in closed:
            self._subscribers.remove(pair)
            pair[0].close()

        Logger.base.debug(
            f'📡 [BROADCASTER:{self._name}] Published: delivered={delivered}, '
            f'dropped={dropped}, pruned={len(closed)}'
        )

    def unsubscribe(self, stream: MemoryObjectReceiveStream[T]) -> None:
        for i, (send_stream, receive_stream) in enumerate(self._subscribers):
            if receive_stream is stream:
                send_stream.close()
                receive_stream.close()
                self._subscribers.pop(i)
                Logger.base.debug(
                    f'📡 [BROADCASTER:{self._name}] Unsubscribed '
                    f'(remaining: {len(self._subscribers)})'
                )
                return
