"""
Live order feed for the staff dashboard.

Keeps a local copy of a restaurant's orders, analytics and notification
counts fresh from two sources: a periodic poll and the change stream pushed
by the server. Bursts of change events collapse into a single refetch, and a
response that arrives after a newer one has been applied is dropped.
"""
import asyncio
import json
import logging
from typing import List, Optional

import websockets
from websockets.exceptions import WebSocketException

from ..schemas.analytics import AnalyticsSummary
from ..schemas.dashboard import DashboardView, NotificationCounts
from ..schemas.menu import MenuOut
from ..schemas.orders import OrderOut
from ..services.views import OrderTab, build_dashboard_view
from ..settings import Settings
from .api import TablesideApi, TablesideClientError, api_from_settings

logger = logging.getLogger(__name__)


class RequestSequencer:
    """Hands out increasing tickets; only a ticket newer than the last applied one is accepted."""

    def __init__(self):
        self.issued = 0
        self.applied = 0

    def next(self) -> int:
        self.issued += 1
        return self.issued

    def accept(self, ticket: int) -> bool:
        if ticket <= self.applied:
            return False
        self.applied = ticket
        return True


class DashboardFeed:
    def __init__(self, api: TablesideApi, restaurant_id: str, poll_interval: float = 5.0,
                 subscribe: bool = True):
        self.api = api
        self.restaurant_id = restaurant_id
        self.poll_interval = poll_interval
        self.subscribe = subscribe
        self.is_running = False

        self.orders: List[OrderOut] = []
        self.analytics: Optional[AnalyticsSummary] = None
        self.notifications = NotificationCounts()
        self.menu: Optional[MenuOut] = None
        self.last_error: Optional[str] = None

        self._sequencer = RequestSequencer()
        self._wake = asyncio.Event()
        self._want_menu = False
        self._tasks: List[asyncio.Task] = []
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    # Refreshing

    async def refresh(self, include_menu: bool = False) -> bool:
        """
        Fetches orders, analytics and notification counts. Returns False when
        the result was discarded because a newer refresh already landed, or
        when the fetch failed; the last known state is kept in both cases.
        """
        ticket = self._sequencer.next()
        self._in_flight += 1
        try:
            orders = await self.api.raw_orders(self.restaurant_id)
            analytics = await self.api.analytics(self.restaurant_id)
            notifications = await self.api.notifications(self.restaurant_id)
            menu = await self.api.get_menu(self.restaurant_id) if include_menu else None
        except TablesideClientError as e:
            logger.warning(f"Dashboard refresh for restaurant {self.restaurant_id} failed: {e}")
            self.last_error = str(e)
            return False
        finally:
            self._in_flight -= 1

        if not self._sequencer.accept(ticket):
            logger.debug(f"Discarding stale dashboard response #{ticket}")
            return False
        self.orders = orders
        self.analytics = analytics
        self.notifications = notifications
        if menu is not None:
            self.menu = menu
        self.last_error = None
        return True

    def request_refresh(self, include_menu: bool = False):
        """Schedules a refresh; requests made while one is in flight fold into one follow-up."""
        self._want_menu = self._want_menu or include_menu
        self._wake.set()

    async def _refresh_worker(self):
        while self.is_running:
            await self._wake.wait()
            self._wake.clear()
            include_menu, self._want_menu = self._want_menu, False
            try:
                await self.refresh(include_menu)
            except Exception as e:
                logger.error(f"Dashboard refresh for restaurant {self.restaurant_id} crashed: {e}", exc_info=True)
                self.last_error = str(e)

    # Sources

    async def _poll_loop(self):
        while self.is_running:
            self.request_refresh(include_menu=True)
            await asyncio.sleep(self.poll_interval)

    async def _subscription_loop(self):
        url = self.api.changes_url(self.restaurant_id)
        while self.is_running:
            try:
                async with websockets.connect(url) as ws:
                    logger.info(f"Subscribed to order changes at {url}")
                    async for message in ws:
                        event = json.loads(message)
                        if isinstance(event, dict) and event.get("table") == "orders":
                            self.request_refresh()
            except (OSError, asyncio.TimeoutError, WebSocketException, ValueError) as e:
                logger.warning(f"Order change stream dropped: {e}")
            if self.is_running:
                # Polling covers the gap until the stream is back
                await asyncio.sleep(self.poll_interval)

    # Lifecycle

    async def start(self):
        if self.is_running:
            return
        self.is_running = True
        self._tasks = [
            asyncio.create_task(self._refresh_worker()),
            asyncio.create_task(self._poll_loop()),
        ]
        if self.subscribe:
            self._tasks.append(asyncio.create_task(self._subscription_loop()))
        logger.info(f"Dashboard feed for restaurant {self.restaurant_id} started")

    async def stop(self):
        self.is_running = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info(f"Dashboard feed for restaurant {self.restaurant_id} stopped")

    # Local projections

    def view(self, tab: OrderTab = OrderTab.OPEN, table_number: Optional[str] = None) -> DashboardView:
        return build_dashboard_view(self.orders, tab, table_number)


def open_dashboard_feed(settings: Settings, restaurant_id: str) -> DashboardFeed:
    return DashboardFeed(api_from_settings(settings), restaurant_id, settings.poll_interval_seconds)
