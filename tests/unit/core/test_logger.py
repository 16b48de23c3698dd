import json
import logging

import pytest

from storefront.core.shared.logger import ColoredFormatter, JSONFormatter, get_service_logger


def make_record(context=None) -> logging.LogRecord:
    record = logging.LogRecord("service.checkout", logging.INFO, __file__, 10, "Order placed", None, None)
    if context is not None:
        record.context = context
    return record


@pytest.mark.unit
def test_json_formatter_includes_context():
    line = JSONFormatter().format(make_record({"order_number": "LS2603-00001"}))

    entry = json.loads(line)
    assert entry["message"] == "Order placed"
    assert entry["level"] == "INFO"
    assert entry["context"] == {"order_number": "LS2603-00001"}


@pytest.mark.unit
def test_colored_formatter_appends_context():
    line = ColoredFormatter().format(make_record({"total": 11349}))

    assert line.endswith("Order placed | total=11349")


@pytest.mark.unit
def test_context_logger_merges_fields(caplog):
    log = get_service_logger("checkout").with_context(cart_id="cart-1")

    with caplog.at_level(logging.INFO, logger="service.checkout"):
        log.info("Order placed", total=500)

    record = caplog.records[-1]
    assert record.context == {"service": "checkout", "cart_id": "cart-1", "total": 500}
