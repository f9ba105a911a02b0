"""
Async HTTP client for the Tableside API.

Used by diner devices and the staff dashboard. Every call is bounded by the
configured request timeout; transport failures, HTTP errors and responses
that do not decode into the expected schema surface as TablesideClientError.
"""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..schemas.analytics import AnalyticsSummary
from ..schemas.cart import CartSubmission
from ..schemas.dashboard import DashboardView, NotificationCounts
from ..schemas.menu import MenuOut, PairingsOut
from ..schemas.orders import DinerRequest, FlagUpdate, OrderOut, OrderPlaced
from ..settings import Settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class TablesideClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def _error_from_response(response: httpx.Response) -> TablesideClientError:
    detail: Any = None
    try:
        body = response.json()
        detail = body.get("detail") if isinstance(body, dict) else None
    except ValueError:
        pass
    if isinstance(detail, dict):
        return TablesideClientError(detail.get("message") or str(detail), response.status_code, detail.get("code"))
    return TablesideClientError(str(detail or response.text or response.reason_phrase), response.status_code)


def _validate(model: Type[ModelT], data: Any, path: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Unexpected {model.__name__} payload from {path}: {e}")
        raise TablesideClientError(f"Unexpected response from {path}") from e


class TablesideApi:
    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "TablesideApi":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def changes_url(self, restaurant_id: str) -> str:
        if self.base_url.startswith("https://"):
            ws_base = "wss://" + self.base_url[len("https://"):]
        else:
            ws_base = "ws://" + self.base_url.split("://", 1)[-1]
        return f"{ws_base}/dashboard/{restaurant_id}/changes"

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise TablesideClientError(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise TablesideClientError(f"Request failed: {e}") from e
        if response.is_error:
            raise _error_from_response(response)
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{method} {path} returned a body that is not JSON: {response.text[:200]!r}")
            raise TablesideClientError(f"Invalid JSON from {method} {path}", response.status_code) from e

    async def _call(self, model: Type[ModelT], method: str, path: str, **kwargs) -> ModelT:
        return _validate(model, await self._request(method, path, **kwargs), path)

    async def _call_list(self, model: Type[ModelT], method: str, path: str, **kwargs) -> List[ModelT]:
        data = await self._request(method, path, **kwargs)
        if not isinstance(data, list):
            raise TablesideClientError(f"Expected a list from {path}, got {type(data).__name__}")
        return [_validate(model, item, path) for item in data]

    # Diner side

    async def get_menu(self, restaurant_id: str) -> MenuOut:
        return await self._call(MenuOut, "GET", f"/restaurants/{restaurant_id}/menu")

    async def get_pairings(self, restaurant_id: str, item_type: str, item_id: str) -> PairingsOut:
        return await self._call(PairingsOut, "GET", f"/restaurants/{restaurant_id}/pairings/{item_type}/{item_id}")

    async def place_order(self, restaurant_id: str, submission: CartSubmission) -> OrderPlaced:
        return await self._call(OrderPlaced, "POST", f"/restaurants/{restaurant_id}/orders",
                                json=submission.model_dump(mode="json"))

    async def track_orders(self, restaurant_id: str, table_number: str, diner_name: str) -> List[OrderOut]:
        return await self._call_list(OrderOut, "GET", f"/restaurants/{restaurant_id}/orders",
                                     params={"table_number": table_number, "diner_name": diner_name})

    async def request_bill(self, restaurant_id: str, table_number: str, diner_name: str) -> FlagUpdate:
        return await self._call(FlagUpdate, "POST", f"/restaurants/{restaurant_id}/tables/{table_number}/bill-request",
                                json=DinerRequest(diner_name=diner_name).model_dump())

    async def call_waiter(self, restaurant_id: str, table_number: str, diner_name: str) -> FlagUpdate:
        return await self._call(FlagUpdate, "POST", f"/restaurants/{restaurant_id}/tables/{table_number}/waiter-call",
                                json=DinerRequest(diner_name=diner_name).model_dump())

    # Staff dashboard

    async def dashboard_view(self, restaurant_id: str, tab: str = "open",
                             table_number: Optional[str] = None) -> DashboardView:
        params: Dict[str, str] = {"tab": tab}
        if table_number:
            params["table_number"] = table_number
        return await self._call(DashboardView, "GET", f"/dashboard/{restaurant_id}/orders", params=params)

    async def raw_orders(self, restaurant_id: str) -> List[OrderOut]:
        return await self._call_list(OrderOut, "GET", f"/dashboard/{restaurant_id}/orders/raw")

    async def confirm_order(self, restaurant_id: str, order_id: int, waiter_name: Optional[str] = None) -> OrderOut:
        return await self._call(OrderOut, "POST", f"/dashboard/{restaurant_id}/orders/{order_id}/confirm",
                                json={"waiter_name": waiter_name})

    async def serve_order(self, restaurant_id: str, order_id: int) -> OrderOut:
        return await self._call(OrderOut, "POST", f"/dashboard/{restaurant_id}/orders/{order_id}/serve")

    async def close_order(self, restaurant_id: str, order_id: int) -> OrderOut:
        return await self._call(OrderOut, "POST", f"/dashboard/{restaurant_id}/orders/{order_id}/close")

    async def close_table(self, restaurant_id: str, table_number: str) -> FlagUpdate:
        return await self._call(FlagUpdate, "POST", f"/dashboard/{restaurant_id}/tables/{table_number}/close")

    async def dismiss_bill_request(self, restaurant_id: str, table_number: str) -> FlagUpdate:
        return await self._call(FlagUpdate, "POST", f"/dashboard/{restaurant_id}/tables/{table_number}/dismiss-bill")

    async def dismiss_waiter_call(self, restaurant_id: str, table_number: str) -> FlagUpdate:
        return await self._call(FlagUpdate, "POST", f"/dashboard/{restaurant_id}/tables/{table_number}/dismiss-waiter")

    async def notifications(self, restaurant_id: str) -> NotificationCounts:
        return await self._call(NotificationCounts, "GET", f"/dashboard/{restaurant_id}/notifications")

    async def analytics(self, restaurant_id: str) -> AnalyticsSummary:
        return await self._call(AnalyticsSummary, "GET", f"/dashboard/{restaurant_id}/analytics")


def api_from_settings(settings: Settings) -> TablesideApi:
    return TablesideApi(settings.api_base_url, settings.request_timeout_seconds)
