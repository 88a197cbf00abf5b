"""Order-placed notifications for operators.

Notifications are MarkdownV2: every line is assembled from fragments escaped with
``escape_markdown_v2`` exactly once, markup characters we add ourselves stay raw.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import AbstractSet, Optional

from orderdesk.logging_config import get_logger
from orderdesk.schemas.order import Customer, OrderPayload, OrderResponse, Product
from orderdesk.schemas.outbound import OutboundMessage
from orderdesk.services.escaping import MarkupDialect, escape_markdown_v2
from orderdesk.services.result import EMPTY_ITEMS, Result
from orderdesk.services.telegram_service import TelegramService

logger = get_logger("order_service")

GROUP_SEPARATOR = "\u00a0"
DECIMAL_SEPARATOR = ","
MAX_FRACTION_DIGITS = 3
MIN_GROUPED_LENGTH = 5
# Telegram caps the /start deep-link parameter at 64 chars of [A-Za-z0-9_-].
START_PARAM_MAX_LENGTH = 64
_START_PARAM_DISALLOWED = re.compile(r"[^A-Za-z0-9_-]")


def _to_decimal(value) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, str):
        value = value.strip().replace(" ", "").replace(GROUP_SEPARATOR, "")
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _group_thousands(digits: str) -> str:
    # ru-RU leaves four-digit numbers ungrouped: 1000, but 10 000.
    if len(digits) < MIN_GROUPED_LENGTH:
        return digits
    return f"{int(digits):,}".replace(",", GROUP_SEPARATOR)


def format_money(value, currency: str = "₸") -> str:
    """``1234567.5`` -> ``1 234 567,5₸`` (no-break spaces); empty string for non-numbers."""
    number = _to_decimal(value)
    if number is None:
        return ""

    try:
        quantized = number.quantize(Decimal(1).scaleb(-MAX_FRACTION_DIGITS), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return ""
    sign = "-" if quantized < 0 else ""
    integer_part, _, fraction = f"{abs(quantized):f}".partition(".")
    fraction = fraction.rstrip("0")

    formatted = _group_thousands(integer_part)
    if fraction:
        formatted = f"{formatted}{DECIMAL_SEPARATOR}{fraction}"
    return f"{sign}{formatted}{currency}"


def _customer_lines(customer: Optional[Customer]) -> list[str]:
    if customer is None:
        return []
    full_name = " ".join(part for part in (customer.first_name, customer.last_name) if part)
    fields = [full_name, customer.phone, customer.email, customer.city, customer.address]
    present = [value for value in fields if value]
    if not present:
        return []
    return ["", "*Покупатель:*"] + [f"• {escape_markdown_v2(value)}" for value in present]


def build_order_message(order: OrderPayload, currency: str = "₸") -> str:
    lines = []
    header = "*Новый заказ*"
    if order.order_id not in (None, ""):
        header += f" \\#{escape_markdown_v2(order.order_id)}"
    lines.append(header)
    lines.append("")
    lines.append("*Товары:*")

    for item in order.items:
        product = item.product or Product()
        quantity = item.quantity if item.quantity is not None else 1
        name = escape_markdown_v2(product.name or "Без названия")
        size = f", размер: {escape_markdown_v2(item.size)}" if item.size else ""
        price = escape_markdown_v2(format_money(product.price, currency))
        lines.append(f"• {name} — {escape_markdown_v2(quantity)} шт{size} — {price}")

    if order.shipping_cost is not None:
        lines.append(f"Доставка: {escape_markdown_v2(format_money(order.shipping_cost, currency))}")

    total = order.total if order.total is not None else 0
    lines.append(f"*Итого:* {escape_markdown_v2(format_money(total, currency))}")

    lines.extend(_customer_lines(order.customer))
    return "\n".join(lines)


def build_bot_link(bot_username: str, order_id, prefix: str = "order_") -> Optional[str]:
    handle = (bot_username or "").strip().lstrip("@")
    if not handle or order_id in (None, ""):
        return None
    reference = _START_PARAM_DISALLOWED.sub("", str(order_id))
    if not reference:
        return None
    start_param = _START_PARAM_DISALLOWED.sub("", f"{prefix}{reference}")[:START_PARAM_MAX_LENGTH]
    return f"https://t.me/{handle}?start={start_param}"


class OrderService:
    def __init__(
        self,
        telegram: TelegramService,
        admin_ids: AbstractSet[str],
        bot_username: str = "",
        currency: str = "₸",
        start_prefix: str = "order_",
    ):
        self.telegram = telegram
        self.admin_ids = admin_ids
        self.bot_username = bot_username
        self.currency = currency
        self.start_prefix = start_prefix

    async def submit(self, order: OrderPayload) -> Result[OrderResponse]:
        if not order.items:
            return Result.invalid(EMPTY_ITEMS)

        order_id = str(order.order_id) if order.order_id not in (None, "") else None
        text = build_order_message(order, self.currency)

        if self.admin_ids:
            await self.telegram.broadcast(
                OutboundMessage(chat_id="", text=text, dialect=MarkupDialect.MARKDOWN_V2),
                sorted(self.admin_ids),
            )
        else:
            logger.warning("Order notification not sent: no admin ids configured")

        logger.info(
            "Order notification processed",
            extra={"context": {"order_id": order_id, "items": len(order.items)}},
        )
        return Result.success(
            OrderResponse(
                success=True,
                order_id=order_id,
                bot_link=build_bot_link(self.bot_username, order_id, self.start_prefix),
            )
        )
