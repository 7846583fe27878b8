import importlib
import json
import logging

from quiz_admin.core import config, logging_setup
from quiz_admin.core.logging_setup import JsonFormatter
from quiz_admin.core.request_context import clear_operation_context, set_operation_context
from quiz_admin.services.in_flight import InFlightRegistry


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("quiz_admin.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_masks_tokens_and_passwords():
    formatter = JsonFormatter("%(message)s")

    line = formatter.format(_record("Authorization: Bearer abc.def password=hunter2 token=xyz"))
    payload = json.loads(line)

    assert "abc.def" not in payload["message"]
    assert "hunter2" not in payload["message"]
    assert "xyz" not in payload["message"]
    assert payload["level"] == "INFO"
    assert payload["module"] == "quiz_admin.test"


def test_formatter_masks_json_token_fields():
    formatter = JsonFormatter("%(message)s")

    line = formatter.format(_record('login response {"access_token": "tok-123", "token_type": "bearer"}'))

    assert "tok-123" not in json.loads(line)["message"]
    assert "bearer" in json.loads(line)["message"]


def test_formatter_includes_request_fields_and_operation():
    formatter = JsonFormatter("%(message)s")
    registry = InFlightRegistry()

    with registry.track("rooms:load") as operation_id:
        line = formatter.format(
            _record(
                "quiz api request completed",
                endpoint="/rooms",
                method="GET",
                status_code=200,
                duration_ms=3.2,
            )
        )

    payload = json.loads(line)
    assert payload["operation_id"] == operation_id
    assert payload["operation_key"] == "rooms:load"
    assert payload["endpoint"] == "/rooms"
    assert payload["method"] == "GET"
    assert payload["status_code"] == 200
    assert payload["duration_ms"] == 3.2
    assert "collection" not in payload


def test_formatter_carries_actor_between_operations():
    formatter = JsonFormatter("%(message)s")
    registry = InFlightRegistry()
    set_operation_context(actor="quizmaster")

    try:
        with registry.track("menus:load"):
            pass
        payload = json.loads(formatter.format(_record("after load")))
    finally:
        clear_operation_context(include_actor=True)

    assert payload["actor"] == "quizmaster"
    assert payload["operation_key"] is None
    assert json.loads(formatter.format(_record("after logout")))["actor"] is None


def test_production_defaults_to_warning(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    try:
        importlib.reload(config)
        assert config.IS_PROD is True
        assert importlib.reload(logging_setup).LOG_LEVEL == "WARNING"

        monkeypatch.setenv("ENV", "dev")
        importlib.reload(config)
        assert importlib.reload(logging_setup).LOG_LEVEL == "INFO"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
        importlib.reload(logging_setup)
