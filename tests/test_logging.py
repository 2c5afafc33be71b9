import json
import logging

from liferpg.core.logging import JsonFormatter, PrettyFormatter, configure_logging


def _record(**extra):
    record = logging.makeLogRecord({"name": "liferpg.energy", "levelname": "WARNING", "msg": "burnout active"})
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_extras(self):
        line = JsonFormatter().format(_record(user_id=7))
        payload = json.loads(line)
        assert payload["message"] == "burnout active"
        assert payload["logger"] == "liferpg.energy"
        assert payload["user_id"] == 7

    def test_pretty_is_one_line(self):
        line = PrettyFormatter().format(_record(day="2026-03-18"))
        assert "\n" not in line
        assert line.endswith("burnout active day=2026-03-18")

    def test_configure_replaces_handlers(self):
        configure_logging(env="production", level="debug")
        configure_logging(env="production", level="debug")
        logger = logging.getLogger("liferpg")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert logger.level == logging.DEBUG
        configure_logging(env="test")
