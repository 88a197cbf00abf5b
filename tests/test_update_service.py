from orderdesk.schemas.telegram import TelegramCallbackQuery, TelegramMessage, TelegramUpdate, TelegramUser
from orderdesk.services.update_service import (
    CallbackEvent,
    MessageEvent,
    UnknownEvent,
    classify_update,
    format_user,
)

from conftest import callback_update, message_update


class TestTelegramSchemas:
    def test_message_from_alias(self):
        msg = TelegramMessage.model_validate(
            {
                "message_id": 100,
                "date": 1702000000,
                "chat": {"id": 555, "type": "private"},
                "from": {"id": 555, "first_name": "Иван"},
                "text": "Здравствуйте",
            }
        )
        assert msg.from_user.first_name == "Иван"
        assert msg.chat.id == 555

    def test_callback_query(self):
        callback = TelegramCallbackQuery.model_validate(
            {"id": "query123", "data": "connect:555", "from": {"id": 111, "first_name": "Admin"}}
        )
        assert callback.from_user.id == 111
        assert callback.data == "connect:555"

    def test_update_without_content(self):
        update = TelegramUpdate(update_id=1)
        assert update.message is None
        assert update.callback_query is None


class TestClassifyUpdate:
    def test_message(self):
        event = classify_update(message_update(555, "Где мой заказ?"))
        assert event == MessageEvent(
            sender_id="555", chat_id="555", text="Где мой заказ?", sender_name="Иван Петров"
        )

    def test_caption_is_used_as_text(self):
        event = classify_update(message_update(555, None, caption="фото брака"))
        assert isinstance(event, MessageEvent)
        assert event.text == "фото брака"

    def test_message_without_text(self):
        event = classify_update(message_update(555))
        assert event.text == ""

    def test_edited_message(self):
        body = message_update(555, "исправлено")
        body["edited_message"] = body.pop("message")
        event = classify_update(body)
        assert isinstance(event, MessageEvent)
        assert event.text == "исправлено"

    def test_group_chat_keeps_chat_id(self):
        event = classify_update(message_update(111, "hi", chat_id=-100500))
        assert event.sender_id == "111"
        assert event.chat_id == "-100500"

    def test_callback(self):
        event = classify_update(callback_update(111, "connect:555", callback_id="cb-7"))
        assert event == CallbackEvent(callback_id="cb-7", admin_id="111", payload="connect:555")

    def test_callback_without_data(self):
        body = callback_update(111, None)
        del body["callback_query"]["data"]
        event = classify_update(body)
        assert event == CallbackEvent(callback_id="cb-1", admin_id="111", payload="")

    def test_callback_wins_over_message(self):
        body = callback_update(111, "connect:555")
        body.update(message_update(555, "hi"))
        assert isinstance(classify_update(body), CallbackEvent)

    def test_other_update_kinds_are_unknown(self):
        assert isinstance(classify_update({"update_id": 3, "my_chat_member": {}}), UnknownEvent)

    def test_message_without_sender_is_unknown(self):
        body = message_update(555, "hi")
        del body["message"]["from"]
        assert isinstance(classify_update(body), UnknownEvent)

    def test_callback_without_sender_is_unknown(self):
        body = callback_update(111, "connect:555")
        del body["callback_query"]["from"]
        event = classify_update(body)
        assert isinstance(event, UnknownEvent)
        assert event.callback_id == "cb-1"

    def test_invalid_shape_is_unknown(self):
        assert isinstance(classify_update({"callback_query": {"data": "connect:1"}}), UnknownEvent)

    def test_non_object_is_unknown(self):
        assert isinstance(classify_update(None), UnknownEvent)
        assert isinstance(classify_update([1, 2]), UnknownEvent)


class TestFormatUser:
    def test_full_name_and_handle(self):
        user = TelegramUser(id=1, first_name="Иван", last_name="Петров", username="ivan")
        assert format_user(user) == "Иван Петров @ivan"

    def test_handle_only(self):
        assert format_user(TelegramUser(id=1, username="ivan")) == "Без имени @ivan"

    def test_nothing(self):
        assert format_user(TelegramUser(id=1)) == "Без имени"
        assert format_user(None) == "Без имени"
