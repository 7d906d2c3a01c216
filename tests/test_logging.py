import json
import logging

import pytest

from school_billing.core.logging import (
    CustomJsonFormatter,
    RequestContextProcessor,
    SensitiveDataProcessor,
    family_id,
    get_logger,
    request_id,
    setup_logging,
)


class TestProcessors:
    def test_request_context_is_attached(self):
        req_token = request_id.set("req-1")
        fam_token = family_id.set("fam-1")
        try:
            event = RequestContextProcessor()(None, "info", {"event": "x"})
        finally:
            request_id.reset(req_token)
            family_id.reset(fam_token)

        assert event["request_id"] == "req-1"
        assert event["family_id"] == "fam-1"
        assert event["service"] == "school-billing"

    def test_sensitive_keys_are_redacted(self):
        event = SensitiveDataProcessor()(
            None,
            "info",
            {"event": "charge", "card_number": "4242", "meta": {"api_token": "t"}, "code": "SAVE10"},
        )

        assert event["card_number"] == "[REDACTED]"
        assert event["meta"]["api_token"] == "[REDACTED]"
        assert event["code"] == "SAVE10"


class TestJsonFormatter:
    def test_record_is_json_with_request_id(self):
        formatter = CustomJsonFormatter("%(name)s %(levelname)s %(message)s")
        record = logging.LogRecord("school_billing.test", logging.INFO, __file__, 10, "hello", None, None)

        token = request_id.set("req-9")
        try:
            payload = json.loads(formatter.format(record))
        finally:
            request_id.reset(token)

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["request_id"] == "req-9"


class TestSetupLogging:
    @pytest.fixture
    def root_handlers(self):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        yield root
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)

    def test_installs_one_tagged_handler(self, root_handlers):
        setup_logging()
        setup_logging()

        tagged = [h for h in root_handlers.handlers if getattr(h, "_school_billing", False)]
        assert len(tagged) == 1

    def test_adapter_merges_context(self, caplog):
        logger = get_logger("school_billing.test").add_context(family_id="fam-2")

        with caplog.at_level(logging.INFO, logger="school_billing.test"):
            logger.info("loaded", extra={"students": 2})

        record = caplog.records[-1]
        assert record.family_id == "fam-2"
        assert record.students == 2
