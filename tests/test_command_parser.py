from orderdesk.services.command_parser import (
    ConnectAction,
    ReplyCommand,
    ReplyUsageError,
    StartCommand,
    UnknownAction,
    order_reference,
    parse_callback_action,
    parse_command,
)


class TestReplyCommand:
    def test_reply_with_target_and_text(self):
        assert parse_command("/reply 555 Здравствуйте, заказ готов") == ReplyCommand(
            customer_id="555", text="Здравствуйте, заказ готов"
        )

    def test_reply_text_keeps_inner_whitespace_and_lines(self):
        command = parse_command("/reply 555 first line\nsecond  line")
        assert command == ReplyCommand(customer_id="555", text="first line\nsecond  line")

    def test_reply_target_separated_by_newline(self):
        assert parse_command("/reply 555\nhello") == ReplyCommand(customer_id="555", text="hello")

    def test_remainder_is_not_parsed_again(self):
        command = parse_command("/reply 555 /reply 777 nested")
        assert command == ReplyCommand(customer_id="555", text="/reply 777 nested")

    def test_missing_text_is_usage_error(self):
        assert parse_command("/reply 555") == ReplyUsageError()

    def test_missing_target_is_usage_error(self):
        assert parse_command("/reply") == ReplyUsageError()

    def test_whitespace_only_text_is_usage_error(self):
        assert parse_command("/reply 555    ") == ReplyUsageError()

    def test_command_addressed_to_this_bot(self):
        command = parse_command("/reply@OrderdeskBot 555 hi", bot_username="orderdeskbot")
        assert command == ReplyCommand(customer_id="555", text="hi")

    def test_command_addressed_to_other_bot_is_ignored(self):
        assert parse_command("/reply@OtherBot 555 hi", bot_username="OrderdeskBot") is None


class TestStartCommand:
    def test_start_with_payload(self):
        assert parse_command("/start order_A-17") == StartCommand(payload="order_A-17")

    def test_start_without_payload(self):
        assert parse_command("/start") == StartCommand(payload="")


class TestFreeText:
    def test_plain_text(self):
        assert parse_command("Добрый день") is None

    def test_empty(self):
        assert parse_command("") is None
        assert parse_command(None) is None
        assert parse_command("   ") is None

    def test_unknown_command(self):
        assert parse_command("/help") is None

    def test_slash_alone(self):
        assert parse_command("/") is None


class TestCallbackAction:
    def test_connect(self):
        assert parse_callback_action("connect:123456") == ConnectAction(customer_id="123456")

    def test_connect_without_id_is_rejected(self):
        assert parse_callback_action("connect:") == UnknownAction(raw="connect:")

    def test_unknown_prefix(self):
        assert parse_callback_action("take_42") == UnknownAction(raw="take_42")

    def test_empty_payload(self):
        assert parse_callback_action(None) == UnknownAction(raw="")

    def test_extra_segments_are_dropped(self):
        assert parse_callback_action("connect:123:extra") == ConnectAction(customer_id="123")


class TestOrderReference:
    def test_prefixed_payload(self):
        assert order_reference("order_A17", "order_") == "A17"

    def test_other_payload(self):
        assert order_reference("promo_summer", "order_") is None

    def test_prefix_only(self):
        assert order_reference("order_", "order_") is None
