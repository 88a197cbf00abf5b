"""Customer <-> operator relay driven by webhook events.

Everything sent from here uses the HTML dialect; user-controlled fragments go
through ``escape_html`` once, while the message is assembled.
"""

from typing import AbstractSet, Optional

from orderdesk.logging_config import get_logger
from orderdesk.schemas.outbound import OutboundMessage
from orderdesk.services.auth import is_admin
from orderdesk.services.command_parser import (
    ConnectAction,
    ReplyCommand,
    ReplyUsageError,
    StartCommand,
    order_reference,
    parse_callback_action,
    parse_command,
)
from orderdesk.services.escaping import MarkupDialect, escape_html
from orderdesk.services.session_store import AdminSessionStore
from orderdesk.services.telegram_service import TelegramService
from orderdesk.services.update_service import CallbackEvent, InboundEvent, MessageEvent

logger = get_logger("relay_service")

NO_RIGHTS_TEXT = "Недостаточно прав"
REPLY_USAGE_TEXT = "Формат: <code>/reply &lt;user_id&gt; &lt;текст&gt;</code>"
ADMIN_HELP_TEXT = "\n".join(
    [
        "Вы администратор. Чтобы ответить пользователю:",
        "1) Нажмите кнопку <b>Ответить пользователю</b> из уведомления о его сообщении,",
        "или 2) используйте команду:",
        "<code>/reply &lt;user_id&gt; &lt;текст&gt;</code>",
    ]
)
CUSTOMER_THANKS_TEXT = "Спасибо! Сообщение отправлено оператору. Скоро ответим."
CUSTOMER_GREETING_TEXT = "Здравствуйте! Напишите ваш вопрос, и оператор ответит вам здесь."
EMPTY_TEXT_PLACEHOLDER = "(без текста)"


class RelayService:
    """Routes one inbound event at a time; the session store is the only shared state."""

    def __init__(
        self,
        telegram: TelegramService,
        sessions: AdminSessionStore,
        admin_ids: AbstractSet[str],
        bot_username: Optional[str] = None,
        order_start_prefix: str = "order_",
    ):
        self.telegram = telegram
        self.sessions = sessions
        self.admin_ids = admin_ids
        self.bot_username = bot_username or None
        self.order_start_prefix = order_start_prefix

    def is_admin(self, user_id) -> bool:
        return is_admin(user_id, self.admin_ids)

    async def handle(self, event: InboundEvent) -> str:
        """Dispatch ``event``; returns a short outcome label for the webhook response."""
        if isinstance(event, CallbackEvent):
            return await self.handle_callback(event)
        if isinstance(event, MessageEvent):
            if self.is_admin(event.sender_id):
                return await self.handle_admin_message(event)
            return await self.handle_customer_message(event)
        if event.callback_id:
            await self.telegram.answer_callback_query(event.callback_id)
        return "ignored"

    async def _send_html(self, chat_id: str, text: str):
        return await self.telegram.send(OutboundMessage(chat_id=chat_id, text=text, dialect=MarkupDialect.HTML))

    async def handle_callback(self, event: CallbackEvent) -> str:
        if not self.is_admin(event.admin_id):
            await self.telegram.answer_callback_query(event.callback_id, NO_RIGHTS_TEXT)
            return "forbidden"

        action = parse_callback_action(event.payload)
        if not isinstance(action, ConnectAction):
            logger.warning(
                "Rejected callback action",
                extra={"context": {"admin_id": event.admin_id, "payload": action.raw[:64]}},
            )
            await self.telegram.answer_callback_query(event.callback_id)
            return "unknown_action"

        await self.telegram.answer_callback_query(event.callback_id)
        self.sessions.bind(event.admin_id, action.customer_id)
        logger.info(
            "Admin connected",
            extra={"context": {"admin_id": event.admin_id, "customer_id": action.customer_id}},
        )
        await self._send_html(
            event.admin_id,
            "Подключено. Теперь все ваши сообщения будут отправляться пользователю "
            f"<code>{escape_html(action.customer_id)}</code>.",
        )
        return "connected"

    async def handle_admin_message(self, event: MessageEvent) -> str:
        command = parse_command(event.text, self.bot_username)

        if isinstance(command, ReplyUsageError):
            await self._send_html(event.chat_id, REPLY_USAGE_TEXT)
            return "usage"

        if isinstance(command, ReplyCommand):
            await self._send_html(command.customer_id, escape_html(command.text))
            await self._send_html(
                event.chat_id,
                f"✅ Отправлено пользователю <code>{escape_html(command.customer_id)}</code>",
            )
            logger.info(
                "Reply sent",
                extra={"context": {"admin_id": event.sender_id, "customer_id": command.customer_id}},
            )
            return "replied"

        customer_id = self.sessions.get(event.sender_id)
        if customer_id:
            if event.text:
                await self._send_html(customer_id, escape_html(event.text))
                logger.info(
                    "Relayed to customer",
                    extra={
                        "context": {
                            "admin_id": event.sender_id,
                            "customer_id": customer_id,
                            "length": len(event.text),
                        }
                    },
                )
            return "relayed"

        await self._send_html(event.chat_id, ADMIN_HELP_TEXT)
        return "admin_help"

    async def handle_customer_message(self, event: MessageEvent) -> str:
        command = parse_command(event.text, self.bot_username)

        if isinstance(command, StartCommand):
            order_id = order_reference(command.payload, self.order_start_prefix)
            if order_id:
                await self._send_html(
                    event.chat_id,
                    f"Спасибо! Заказ <b>№{escape_html(order_id)}</b> получен. "
                    "Оператор свяжется с вами здесь. Если есть вопросы, просто напишите их в этот чат.",
                )
                logger.info(
                    "Order link opened",
                    extra={"context": {"customer_id": event.sender_id, "order_id": order_id}},
                )
                return "order_ack"
            await self._send_html(event.chat_id, CUSTOMER_GREETING_TEXT)
            return "greeting"

        card = "\n".join(
            [
                "<b>Новое сообщение от клиента</b>",
                f"ID: <code>{escape_html(event.sender_id)}</code>",
                f"Имя: {escape_html(event.sender_name or 'Без имени')}",
                "",
                "Текст:",
                escape_html(event.text) if event.text else EMPTY_TEXT_PLACEHOLDER,
            ]
        )
        await self.telegram.broadcast(
            OutboundMessage(
                chat_id="",
                text=card,
                dialect=MarkupDialect.HTML,
                connect_customer_id=event.sender_id,
            ),
            sorted(self.admin_ids),
        )
        await self._send_html(event.chat_id, CUSTOMER_THANKS_TEXT)
        return "forwarded"
