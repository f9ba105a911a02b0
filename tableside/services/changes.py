import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)


class ChangeBroker:
    """
    Fan-out of "something changed" notifications per restaurant.

    Subscribers are websocket handlers running on the event loop, while
    publishers are often sync route handlers running in the threadpool, so
    delivery goes through call_soon_threadsafe. Events carry no diff: a
    subscriber is expected to re-fetch.
    """

    def __init__(self, queue_size: int = 16):
        self.queue_size = queue_size
        self._subscribers: Dict[str, List[Tuple[asyncio.AbstractEventLoop, asyncio.Queue]]] = defaultdict(list)

    def subscribe(self, restaurant_id: str) -> asyncio.Queue:
        queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers[restaurant_id].append((asyncio.get_running_loop(), queue))
        logger.info(f"Change subscriber added for restaurant {restaurant_id}")
        return queue

    def unsubscribe(self, restaurant_id: str, queue: asyncio.Queue):
        subscribers = self._subscribers.get(restaurant_id, [])
        self._subscribers[restaurant_id] = [(loop, q) for loop, q in subscribers if q is not queue]
        if not self._subscribers[restaurant_id]:
            del self._subscribers[restaurant_id]
        logger.info(f"Change subscriber removed for restaurant {restaurant_id}")

    def subscriber_count(self, restaurant_id: str) -> int:
        return len(self._subscribers.get(restaurant_id, []))

    def publish(self, restaurant_id: str, table: str = "orders"):
        event = {"table": table, "restaurant_id": restaurant_id}
        for loop, queue in list(self._subscribers.get(restaurant_id, [])):
            try:
                loop.call_soon_threadsafe(_offer, queue, event)
            except RuntimeError as e:
                # Loop already closed, the socket handler will unsubscribe
                logger.warning(f"Dropping change event for restaurant {restaurant_id}: {e}")


def _offer(queue: asyncio.Queue, event: dict):
    try:
        queue.put_nowait(event)
    except asyncio.QueueFull:
        pass  # coalesced with the event already queued
