"""
Client-side mirror of a user's cart.

``CartSyncClient`` talks to the cart HTTP API and keeps the last confirmed
cart in memory for a UI to render. State only changes after the server
answers: a successful response replaces the cached cart wholesale, a failed
one leaves it untouched. Every mutation outcome is reported through exactly
one notification.
"""
from typing import Callable, FrozenSet, List, Optional, Set
from urllib.parse import quote

import httpx
import logging
from pydantic import BaseModel

from sportspro.commonUtils.enumUtils import NotificationLevel
from sportspro.commonUtils.pricingUtil import OrderSummary, summarize_cart
from sportspro.schemas.cartSchema import CartRead

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5001/api"
DEFAULT_TIMEOUT_SECONDS = 10.0

SIGN_IN_MESSAGE = "Please sign in to manage your cart"

# In-flight key for operations spanning the whole cart
CLEAR_MARKER = "*"


class Notification(BaseModel):
    level: NotificationLevel
    message: str


CartListener = Callable[[CartRead], None]
Notifier = Callable[[Notification], None]
TokenProvider = Callable[[], Optional[str]]


def log_notification(notification: Notification) -> None:
    logger.info(f"[{notification.level.value}] {notification.message}")


class CartSyncClient:
    def __init__(
            self,
            base_url: str = DEFAULT_BASE_URL,
            token_provider: Optional[TokenProvider] = None,
            notify: Optional[Notifier] = None,
            timeout: float = DEFAULT_TIMEOUT_SECONDS,
            http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._token_provider = token_provider or (lambda: None)
        self._notify = notify or log_notification

        self._cart = CartRead()
        self._pending = 0
        self._in_flight: Set[str] = set()
        self._listeners: List[CartListener] = []

    async def __aenter__(self) -> "CartSyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ------------------------------------------------------------------ state
    @property
    def cart(self) -> CartRead:
        return self._cart

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @property
    def in_flight(self) -> FrozenSet[str]:
        return frozenset(self._in_flight)

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    @property
    def summary(self) -> OrderSummary:
        return summarize_cart(self._cart)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Call ``listener`` with every new cart; returns the unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset(self) -> None:
        """Drop the cached cart, e.g. on sign-out or when switching users."""
        self._replace(CartRead(), force=True)

    # ------------------------------------------------------------- operations
    async def refresh(self) -> bool:
        token = self._token_provider()
        if not token:
            self.reset()
            return False

        self._pending += 1
        try:
            response = await self._send("GET", "/cart", token)
        except httpx.HTTPError as exc:
            logger.warning(f"Error fetching cart: {exc!r}")
            return False
        finally:
            self._pending -= 1

        if not response.is_success:
            logger.warning(f"Error fetching cart: HTTP {response.status_code}")
            return False
        return self._apply(response) is not None

    async def add_item(self, equipment_id: str, quantity: int = 1) -> bool:
        # Adding equipment already in the cart changes that line, so it shares the line's marker
        line = next((item for item in self._cart.items if item.equipment_id == equipment_id), None)
        key = line.id if line else f"add:{equipment_id}"
        return await self._mutate(
            key, "POST", "/cart/add",
            json={"equipmentId": equipment_id, "quantity": quantity},
            success_message="Item added to cart!",
            failure_message="Failed to add item to cart",
        )

    async def update_quantity(self, item_id: str, quantity: int) -> bool:
        return await self._mutate(
            item_id, "PUT", f"/cart/update/{quote(item_id, safe='')}",
            json={"quantity": quantity},
            success_message="Cart updated!",
            failure_message="Failed to update cart",
        )

    async def remove_item(self, item_id: str) -> bool:
        return await self._mutate(
            item_id, "DELETE", f"/cart/remove/{quote(item_id, safe='')}",
            success_message="Item removed from cart!",
            failure_message="Failed to remove item",
        )

    async def clear(self) -> bool:
        return await self._mutate(
            CLEAR_MARKER, "DELETE", "/cart/clear",
            success_message="Cart cleared!",
            failure_message="Failed to clear cart",
        )

    # ---------------------------------------------------------------- helpers
    async def _mutate(self, key: str, method: str, path: str, success_message: str,
                      failure_message: str, json: Optional[dict] = None) -> bool:
        token = self._token_provider()
        if not token:
            self.reset()
            self._emit(NotificationLevel.ERROR, SIGN_IN_MESSAGE)
            return False

        if key in self._in_flight:
            logger.debug(f"Ignoring {method} {path}: a request for {key} is still in flight")
            return False

        self._in_flight.add(key)
        self._pending += 1
        try:
            response = await self._send(method, path, token, json)
        except httpx.HTTPError as exc:
            # Timeouts land here too, so a hung request never pins its marker
            logger.warning(f"{method} {path} failed: {exc!r}")
            self._emit(NotificationLevel.ERROR, failure_message)
            return False
        finally:
            self._in_flight.discard(key)
            self._pending -= 1

        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.reset()
            self._emit(NotificationLevel.ERROR, SIGN_IN_MESSAGE)
            return False

        if not response.is_success:
            self._emit(NotificationLevel.ERROR, self._error_message(response) or failure_message)
            return False

        if self._apply(response) is None:
            self._emit(NotificationLevel.ERROR, failure_message)
            return False

        self._emit(NotificationLevel.SUCCESS, success_message)
        return True

    async def _send(self, method: str, path: str, token: str, json: Optional[dict] = None) -> httpx.Response:
        return await self._http.request(
            method, path, json=json, headers={"Authorization": f"Bearer {token}"}
        )

    def _apply(self, response: httpx.Response) -> Optional[CartRead]:
        """Parse a cart response and replace the cache with it; None if unreadable."""
        try:
            cart = CartRead.model_validate(response.json())
        except ValueError as exc:
            logger.error(f"Unreadable cart response from {response.request.url}: {exc}")
            return None

        self._replace(cart)
        return cart

    def _replace(self, cart: CartRead, force: bool = False) -> None:
        # Responses may complete out of order; never go back to an older version.
        if not force and cart.version < self._cart.version:
            logger.debug(f"Discarding stale cart version {cart.version} (have {self._cart.version})")
            return

        self._cart = cart
        for listener in list(self._listeners):
            listener(cart)

    def _emit(self, level: NotificationLevel, message: str) -> None:
        self._notify(Notification(level=level, message=message))

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        error = body.get("error") if isinstance(body, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        return message if isinstance(message, str) else None
