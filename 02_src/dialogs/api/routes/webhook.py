"""Telegram webhook route."""

import secrets
from typing import Any

from fastapi import APIRouter, Body, Header, HTTPException
from pydantic import BaseModel

from ...app import IApplication
from ...config import Settings
from ...logging_config import get_logger
from ...models import Update

logger = get_logger(__name__)


class WebhookResponse(BaseModel):
    """Response model for webhook."""

    handled: bool


def create_webhook_router(app: IApplication, settings: Settings | None = None) -> APIRouter:
    """Create webhook router."""
    router = APIRouter(tags=["webhook"])
    expected_secret = (settings or app.settings).webhook_secret

    @router.post("/webhook", response_model=WebhookResponse)
    async def receive_update(
        payload: dict[str, Any] = Body(...),
        secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
    ) -> dict:
        """Feed one Telegram update into the dialog manager."""
        if expected_secret and not secrets.compare_digest(
            secret_token or "", expected_secret
        ):
            raise HTTPException(status_code=401, detail="Invalid secret token")

        update = Update.from_dict(payload)
        try:
            handled = await app.handle_update(update)
        except Exception as e:
            logger.error(
                f"Update {update.update_id} failed: {e}",
                exc_info=True,
                extra={"update_id": update.update_id},
            )
            raise HTTPException(status_code=500, detail=str(e))

        return {"handled": handled}

    return router
