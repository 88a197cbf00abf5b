import asyncio
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import httpx

from orderdesk.logging_config import get_logger
from orderdesk.schemas.outbound import OutboundMessage

logger = get_logger("telegram_service")

# Telegram shows short answers as a toast; longer ones need a modal alert.
CALLBACK_ALERT_THRESHOLD = 40


class TelegramAPIError(Exception):
    def __init__(self, method: str, status_code: Optional[int], description: str):
        self.method = method
        self.status_code = status_code
        self.description = description
        super().__init__(f"TG {method} {status_code}: {description}")


@dataclass
class BroadcastResult:
    delivered: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)


class TelegramService:
    """Async client for the Bot API methods the relay needs."""

    BASE_URL = "{api_base}/bot{token}"

    def __init__(
        self,
        bot_token: str,
        api_base: str = "https://api.telegram.org",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bot_token = bot_token
        self.base_url = self.BASE_URL.format(api_base=api_base.rstrip("/"), token=bot_token)
        self.timeout = timeout
        self._transport = transport

    async def _make_request(self, method: str, data: dict) -> Any:
        """POST ``data`` as JSON and return ``result``. Raises TelegramAPIError on any failure."""
        if not self.bot_token:
            raise TelegramAPIError(method, None, "bot token is not configured")

        url = f"{self.base_url}/{method}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=data)
        except httpx.HTTPError as e:
            raise TelegramAPIError(method, None, str(e) or e.__class__.__name__) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success or not isinstance(body, dict) or body.get("ok") is False:
            description = body.get("description") if isinstance(body, dict) else None
            raise TelegramAPIError(method, response.status_code, description or response.text)

        return body.get("result")

    async def send(self, message: OutboundMessage) -> Any:
        """Single-target send; failures propagate to the caller."""
        return await self._make_request("sendMessage", message.to_payload())

    async def broadcast(self, message: OutboundMessage, chat_ids: Iterable[str]) -> BroadcastResult:
        """Send ``message`` to every chat concurrently. Never raises for per-target failures."""
        targets = list(dict.fromkeys(str(chat_id) for chat_id in chat_ids))
        result = BroadcastResult()
        if not targets:
            logger.warning("Broadcast skipped: no targets configured")
            return result

        outcomes = await asyncio.gather(
            *(self.send(message.for_target(chat_id)) for chat_id in targets),
            return_exceptions=True,
        )

        for chat_id, outcome in zip(targets, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                result.failed[chat_id] = str(outcome)
                logger.error(
                    "Broadcast delivery failed",
                    extra={"context": {"chat_id": chat_id, "error": str(outcome)}},
                )
            else:
                result.delivered.append(chat_id)

        logger.info(
            "Broadcast finished",
            extra={"context": {"delivered": len(result.delivered), "failed": len(result.failed)}},
        )
        return result

    async def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> bool:
        """Best-effort acknowledgment of a button press; failures are only logged."""
        data: dict[str, Any] = {"callback_query_id": callback_query_id}
        if text:
            data["text"] = text
            data["show_alert"] = len(text) > CALLBACK_ALERT_THRESHOLD
        try:
            await self._make_request("answerCallbackQuery", data)
            return True
        except TelegramAPIError as e:
            logger.warning(
                "answerCallbackQuery failed",
                extra={"context": {"callback_query_id": callback_query_id, "error": e.description}},
            )
            return False
