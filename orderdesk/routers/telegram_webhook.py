import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from orderdesk.dependencies import get_relay_service
from orderdesk.logging_config import get_logger
from orderdesk.schemas.telegram import TelegramWebhookResponse
from orderdesk.services.relay_service import RelayService
from orderdesk.services.update_service import UnknownEvent, classify_update

logger = get_logger("telegram_webhook")

router = APIRouter()


async def parse_telegram_update(request: Request) -> Optional[Any]:
    """
    Parse Telegram update with tolerant decoding to avoid utf-8 crashes.
    Returns the decoded JSON value or None.
    """
    raw = await request.body()
    for enc in ("utf-8", "latin-1"):
        try:
            return json.loads(raw.decode(enc, errors="replace"))
        except ValueError:
            continue

    logger.error("Failed to decode Telegram webhook payload after fallbacks")
    return None


@router.post("/api/telegram/webhook", response_model=TelegramWebhookResponse)
async def handle_telegram_webhook(request: Request, relay: RelayService = Depends(get_relay_service)):
    """
    Handle Telegram webhook updates:
    - Callback queries (connect button) -> bind admin to customer
    - Messages from admins -> /reply or relay to the bound customer
    - Messages from customers -> forward to every admin

    Always answers 200 with success so Telegram does not redeliver.
    """
    try:
        body = await parse_telegram_update(request)
        event = classify_update(body)

        if isinstance(event, UnknownEvent):
            logger.debug(f"Ignoring update: {event.reason}")
            await relay.handle(event)
            return TelegramWebhookResponse(success=True, message="No actionable content")

        outcome = await relay.handle(event)
        return TelegramWebhookResponse(success=True, message=outcome)

    except Exception as e:
        logger.error(f"Telegram webhook error: {e}", exc_info=True)
        return TelegramWebhookResponse(success=True, message="error")
