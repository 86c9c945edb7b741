"""Telegram Bot API client."""

from typing import Any, Protocol

import httpx

from ..config import DEFAULT_TELEGRAM_API_URL
from ..logging_config import get_logger

logger = get_logger(__name__)


class TelegramError(RuntimeError):
    """Bot API call failed."""

    def __init__(self, description: str, error_code: int | None = None):
        super().__init__(description)
        self.description = description
        self.error_code = error_code


class IBot(Protocol):
    """Bot-platform handle injected into dialogs."""

    async def send_message(self, chat_id: int | str, text: str, **params: Any) -> dict:
        """Send a text message to a chat."""
        ...


class TelegramBot:
    """Minimal async Bot API client on httpx."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_TELEGRAM_API_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        if not token:
            raise ValueError("Bot token is required")

        self._token = token
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._token}/{method}"

    async def call(self, method: str, **params: Any) -> Any:
        """Call a Bot API method and return its ``result``."""
        payload = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._client.post(self._method_url(method), json=payload)
        except httpx.HTTPError as e:
            # Keep the token out of the message, it is part of the URL
            raise TelegramError(f"{method} request failed: {type(e).__name__}") from e

        try:
            body = response.json()
        except ValueError:
            raise TelegramError(
                f"{method} returned non-JSON response", response.status_code
            ) from None

        if not body.get("ok"):
            description = body.get("description", "Unknown error")
            logger.warning("Bot API %s failed: %s", method, description)
            raise TelegramError(description, body.get("error_code", response.status_code))

        return body.get("result")

    async def send_message(self, chat_id: int | str, text: str, **params: Any) -> dict:
        """Send a text message to a chat."""
        return await self.call("sendMessage", chat_id=chat_id, text=text, **params)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
