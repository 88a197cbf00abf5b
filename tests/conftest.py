import pytest

from orderdesk.config import Settings
from orderdesk.services.relay_service import RelayService
from orderdesk.services.session_store import InMemorySessionStore
from orderdesk.services.telegram_service import TelegramAPIError, TelegramService

ADMIN_IDS = frozenset({"111", "222", "333"})


class FakeTelegram(TelegramService):
    """Records every Bot API call instead of hitting the network."""

    def __init__(self, failing_chat_ids=()):
        super().__init__("test-token")
        self.calls = []
        self.failing_chat_ids = {str(chat_id) for chat_id in failing_chat_ids}

    async def _make_request(self, method, data):
        self.calls.append((method, data))
        if method == "sendMessage" and str(data["chat_id"]) in self.failing_chat_ids:
            raise TelegramAPIError(method, 400, "Bad Request: chat not found")
        return {"message_id": len(self.calls)}

    @property
    def sent(self):
        return [data for method, data in self.calls if method == "sendMessage"]

    @property
    def answered(self):
        return [data for method, data in self.calls if method == "answerCallbackQuery"]

    def sent_to(self, chat_id):
        return [data["text"] for data in self.sent if str(data["chat_id"]) == str(chat_id)]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        telegram_bot_token="test-token",
        telegram_bot_username="@OrderdeskBot",
        telegram_admin_ids="111, 222,333",
    )


@pytest.fixture
def telegram():
    return FakeTelegram()


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def relay(telegram, sessions):
    return RelayService(telegram=telegram, sessions=sessions, admin_ids=ADMIN_IDS, bot_username="OrderdeskBot")


def message_update(sender_id, text=None, chat_id=None, update_id=1, **extra):
    message = {
        "message_id": 10,
        "date": 1702000000,
        "chat": {"id": chat_id if chat_id is not None else sender_id, "type": "private"},
        "from": {"id": sender_id, "is_bot": False, "first_name": "Иван", "last_name": "Петров"},
    }
    if text is not None:
        message["text"] = text
    message.update(extra)
    return {"update_id": update_id, "message": message}


def callback_update(sender_id, data, callback_id="cb-1", update_id=2):
    return {
        "update_id": update_id,
        "callback_query": {
            "id": callback_id,
            "from": {"id": sender_id, "is_bot": False, "first_name": "Admin"},
            "data": data,
        },
    }
