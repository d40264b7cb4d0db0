import logging

from rankbot.utils.logging_redaction import RedactingFilter, install_redaction_filter, redact_message

TOKEN = "123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaw"


def test_redacts_token_in_bot_api_url():
    message = f"POST https://api.telegram.org/bot{TOKEN}/getUpdates failed"
    assert redact_message(message) == "POST https://api.telegram.org/bot[REDACTED]/getUpdates failed"


def test_redacts_bare_token():
    assert TOKEN not in redact_message(f"using {TOKEN}")


def test_redacts_bearer_and_key_values():
    assert redact_message("Authorization: Bearer abc.def-123") == "Authorization: Bearer [REDACTED]"
    assert redact_message("api_key=secret123") == "api_key=[REDACTED]"


def test_plain_messages_untouched():
    message = "[scroll] provider=coingecko HTTP 500: upstream error"
    assert redact_message(message) == message


def test_filter_redacts_formatted_args():
    record = logging.LogRecord(
        "httpx", logging.INFO, __file__, 1, "HTTP Request: %s", (f"https://api.telegram.org/bot{TOKEN}/getMe",), None
    )
    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "HTTP Request: https://api.telegram.org/bot[REDACTED]/getMe"
    assert record.args == ()


def test_filter_passes_broken_records_through():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "%d items", ("many",), None)
    assert RedactingFilter().filter(record) is True
    assert record.args == ("many",)


def test_install_is_idempotent():
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.addHandler(handler)
    try:
        install_redaction_filter()
        install_redaction_filter()
        assert sum(isinstance(f, RedactingFilter) for f in handler.filters) == 1
    finally:
        root.removeHandler(handler)
