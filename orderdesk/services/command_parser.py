"""Operator commands and callback payloads.

Commands look at the first two whitespace-separated tokens only; whatever follows
is opaque payload text and is not parsed again.
"""

from dataclasses import dataclass
from typing import Optional, Union

CONNECT_PREFIX = "connect:"


@dataclass(frozen=True)
class ReplyCommand:
    customer_id: str
    text: str


@dataclass(frozen=True)
class ReplyUsageError:
    """``/reply`` without a target or without text."""


@dataclass(frozen=True)
class StartCommand:
    payload: str


Command = Union[ReplyCommand, ReplyUsageError, StartCommand]


@dataclass(frozen=True)
class ConnectAction:
    customer_id: str


@dataclass(frozen=True)
class UnknownAction:
    raw: str


CallbackAction = Union[ConnectAction, UnknownAction]


def _command_name(token: str, bot_username: Optional[str]) -> Optional[str]:
    if not token.startswith("/") or len(token) < 2:
        return None
    name, _, target = token[1:].partition("@")
    if target and bot_username and target.lower() != bot_username.lower():
        return None
    return name.lower()


def parse_command(text: Optional[str], bot_username: Optional[str] = None) -> Optional[Command]:
    """Return the command in ``text`` or None for free-form text."""
    if not text:
        return None
    parts = text.strip().split(None, 2)
    if not parts:
        return None

    name = _command_name(parts[0], bot_username)
    if name == "reply":
        customer_id = parts[1] if len(parts) > 1 else ""
        reply_text = parts[2].strip() if len(parts) > 2 else ""
        if not customer_id or not reply_text:
            return ReplyUsageError()
        return ReplyCommand(customer_id=customer_id, text=reply_text)

    if name == "start":
        # /start takes one deep-link parameter; anything after the second token is ignored.
        payload = parts[1] if len(parts) > 1 else ""
        return StartCommand(payload=payload)

    return None


def parse_callback_action(data: Optional[str]) -> CallbackAction:
    raw = data or ""
    if raw.startswith(CONNECT_PREFIX):
        customer_id = raw[len(CONNECT_PREFIX):].split(":", 1)[0].strip()
        if customer_id:
            return ConnectAction(customer_id=customer_id)
    return UnknownAction(raw=raw)


def order_reference(payload: str, prefix: str) -> Optional[str]:
    """Order id carried by a ``/start`` deep link, if the payload is an order link."""
    if not prefix or not payload.startswith(prefix):
        return None
    return payload[len(prefix):] or None
