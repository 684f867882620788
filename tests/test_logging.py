import io
import json

from ots_client.config import ClientConfig
from ots_client.logging import configure_logging, get_logger, redact_mapping


def test_redact_mapping() -> None:
    values = {"Authorization": "Basic abc", "ttl": "60", "secret": "hunter2"}
    assert redact_mapping(values) == {
        "Authorization": "***REDACTED***",
        "ttl": "60",
        "secret": "***REDACTED***",
    }
    assert redact_mapping({"recipient": "a@x"}, extra_keys=["RECIPIENT"]) == {
        "recipient": "***REDACTED***"
    }


def test_json_log_format() -> None:
    stream = io.StringIO()
    configure_logging(ClientConfig(log_format="json", log_level="INFO"), stream=stream)
    get_logger("ots.test").info("hello", extra={"path": "/status"})

    record = json.loads(stream.getvalue())
    assert record["message"] == "hello"
    assert record["logger"] == "ots.test"
    assert record["path"] == "/status"


def test_debug_config_enables_debug_level() -> None:
    stream = io.StringIO()
    configure_logging(ClientConfig(debug=True), stream=stream)
    get_logger("ots.test").debug("visible")
    assert "visible" in stream.getvalue()
