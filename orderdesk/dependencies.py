from fastapi import Depends, Request

from orderdesk.config import Settings, get_settings
from orderdesk.services.order_service import OrderService
from orderdesk.services.relay_service import RelayService
from orderdesk.services.session_store import AdminSessionStore
from orderdesk.services.telegram_service import TelegramService


def get_session_store(request: Request) -> AdminSessionStore:
    return request.app.state.session_store


def get_telegram_service(settings: Settings = Depends(get_settings)) -> TelegramService:
    return TelegramService(
        settings.telegram_bot_token,
        api_base=settings.telegram_api_base,
        timeout=settings.telegram_timeout_seconds,
    )


def get_relay_service(
    settings: Settings = Depends(get_settings),
    telegram: TelegramService = Depends(get_telegram_service),
    sessions: AdminSessionStore = Depends(get_session_store),
) -> RelayService:
    return RelayService(
        telegram=telegram,
        sessions=sessions,
        admin_ids=settings.admin_ids,
        bot_username=settings.bot_handle,
        order_start_prefix=settings.order_start_prefix,
    )


def get_order_service(
    settings: Settings = Depends(get_settings),
    telegram: TelegramService = Depends(get_telegram_service),
) -> OrderService:
    return OrderService(
        telegram=telegram,
        admin_ids=settings.admin_ids,
        bot_username=settings.bot_handle,
        currency=settings.currency_suffix,
        start_prefix=settings.order_start_prefix,
    )
