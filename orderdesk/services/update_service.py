from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from orderdesk.logging_config import get_logger
from orderdesk.schemas.telegram import TelegramUpdate, TelegramUser

logger = get_logger("update_service")


@dataclass(frozen=True)
class MessageEvent:
    sender_id: str
    chat_id: str
    text: str
    sender_name: str = ""


@dataclass(frozen=True)
class CallbackEvent:
    callback_id: str
    admin_id: str
    payload: str


@dataclass(frozen=True)
class UnknownEvent:
    reason: str
    # Set when the update was a callback query; it still needs an answer.
    callback_id: Optional[str] = None


InboundEvent = Union[MessageEvent, CallbackEvent, UnknownEvent]


def format_user(user: Optional[TelegramUser]) -> str:
    """Display card for operators: full name (or placeholder) plus @username."""
    if user is None:
        return "Без имени"
    name = " ".join(part for part in (user.first_name, user.last_name) if part).strip()
    handle = f"@{user.username}" if user.username else ""
    return f"{name or 'Без имени'} {handle}".strip()


def classify_update(body: Any) -> InboundEvent:
    """Turn a raw webhook body into one of the inbound event variants."""
    if not isinstance(body, dict):
        return UnknownEvent(reason="payload is not an object")

    try:
        update = TelegramUpdate.model_validate(body)
    except ValidationError as e:
        logger.warning(
            "Unrecognized update shape",
            extra={"context": {"update_id": body.get("update_id"), "errors": e.error_count()}},
        )
        return UnknownEvent(reason="invalid update")

    callback = update.callback_query
    if callback is not None:
        if callback.from_user is None:
            return UnknownEvent(reason="callback without sender", callback_id=callback.id)
        return CallbackEvent(
            callback_id=callback.id,
            admin_id=str(callback.from_user.id),
            payload=callback.data or "",
        )

    message = update.message or update.edited_message
    if message is None:
        return UnknownEvent(reason="no actionable content")
    if message.from_user is None or message.chat is None:
        return UnknownEvent(reason="message without sender or chat")

    return MessageEvent(
        sender_id=str(message.from_user.id),
        chat_id=str(message.chat.id),
        text=message.text or message.caption or "",
        sender_name=format_user(message.from_user),
    )
