from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from orderdesk.services.escaping import MarkupDialect

CONNECT_BUTTON_TEXT = "Ответить пользователю"


class OutboundMessage(BaseModel):
    """Text ready to send: every user-controlled fragment already escaped for ``dialect``."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    text: str
    dialect: MarkupDialect = MarkupDialect.HTML
    connect_customer_id: Optional[str] = None

    def for_target(self, chat_id: str) -> "OutboundMessage":
        return self.model_copy(update={"chat_id": str(chat_id)})

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chat_id": self.chat_id,
            "text": self.text,
            "parse_mode": self.dialect.value,
        }
        if self.connect_customer_id:
            payload["reply_markup"] = build_connect_keyboard(self.connect_customer_id)
        return payload


def build_connect_keyboard(customer_id: str) -> dict:
    """Inline keyboard with a single button binding the admin to ``customer_id``."""
    return {
        "inline_keyboard": [
            [{"text": CONNECT_BUTTON_TEXT, "callback_data": f"connect:{customer_id}"}],
        ]
    }
