import io
import json

import structlog

from bridge_keystore.logging import configure_logging


def test_json_lines_with_redacted_secret_fields() -> None:
    stream = io.StringIO()
    configure_logging("info", stream=stream)
    log = structlog.get_logger("bridge_keystore.test")
    log.info("careless_call", name="relayer", passphrase="hunter2", extra={"mnemonic": "abandon about"})
    log.debug("hidden_at_info")

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["msg"] == "careless_call"
    assert entry["level"] == "info"
    assert entry["component"] == "bridge_keystore.test"
    assert entry["name"] == "relayer"
    assert entry["passphrase"] == "<redacted>"
    assert entry["extra"] == {"mnemonic": "<redacted>"}
    assert "ts" in entry
    assert "hunter2" not in lines[0]
