"""
In-memory State Broadcaster Interface

Pub/sub channel for pushing state snapshots from a controller to the
views rendering it (countdown banner, seat map, payment page) within the
same process.
"""

from typing import Protocol, TypeVar

from anyio.streams.memory import MemoryObjectReceiveStream


T = TypeVar('T')


class IInMemoryBroadcaster(Protocol[T]):
    """
    Interface for in-memory state broadcasting

    Uses anyio's MemoryObjectStream so subscribers can simply
    `async for state in stream`.
    """

    def subscribe(self) -> MemoryObjectReceiveStream[T]:
        """
        Register a new subscriber

        Returns:
            MemoryObjectReceiveStream that will receive every published item
        """
        ...

    def publish(self, item: T) -> None:
        """
        Publish an item to all subscribers

        Note:
            - Never blocks: drops the item for subscribers whose buffer is full
            - Silently ignores if no subscribers exist
        """
        ...

    def unsubscribe(self, stream: MemoryObjectReceiveStream[T]) -> None:
        """
        Unsubscribe and close the subscriber's streams

        Note:
            - Safe to call with an unknown or already removed stream
        """
        ...
