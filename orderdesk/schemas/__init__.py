from orderdesk.schemas.order import CartItem, Customer, OrderPayload, OrderResponse, Product
from orderdesk.schemas.telegram import TelegramUpdate, TelegramWebhookResponse

__all__ = [
    "CartItem",
    "Customer",
    "OrderPayload",
    "OrderResponse",
    "Product",
    "TelegramUpdate",
    "TelegramWebhookResponse",
]
