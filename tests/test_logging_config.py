from __future__ import annotations

import json
import logging
import logging.config
from pathlib import Path

from dataviz_gen.core.logging_config import (
    LOGGING_CONFIG,
    build_logging_config,
    get_logger,
    setup_logging,
)


def test_defaults_log_json_to_file() -> None:
    config = build_logging_config()
    assert config["handlers"]["json_file"]["formatter"] == "json"
    assert config["handlers"]["console"]["formatter"] == "console"
    assert config["loggers"]["dataviz_gen"]["handlers"] == ["console", "json_file"]


def test_options_do_not_mutate_module_config() -> None:
    config = build_logging_config(json_output=True, log_level="debug", log_file=None)

    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["handlers"]["console"]["level"] == "DEBUG"
    assert "json_file" not in config["handlers"]
    assert config["loggers"]["dataviz_gen"]["handlers"] == ["console"]
    assert LOGGING_CONFIG["handlers"]["console"]["formatter"] == "console"
    assert "json_file" in LOGGING_CONFIG["handlers"]


def test_setup_logging_writes_structured_records(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "dataviz.log"
    setup_logging(log_level="INFO", log_file=log_file)
    try:
        get_logger("dataviz_gen.tests").info("Chart rendered", extra={"kind": "pie"})
        for handler in logging.getLogger("dataviz_gen").handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["message"] == "Chart rendered"
        assert record["kind"] == "pie"
        assert record["name"] == "dataviz_gen.tests"
    finally:
        for handler in logging.getLogger("dataviz_gen").handlers:
            handler.close()
        logging.config.dictConfig(build_logging_config(log_file=None))
