"""Unit tests for payment metrics and JSON logging"""

import json
import logging

from prometheus_client import REGISTRY

from paygate.domain.models import PaymentMetricEvent
from paygate.infrastructure.observability.logging import CustomJsonFormatter
from paygate.infrastructure.observability.metrics import PrometheusMetricSink


def sample(outcome: str):
    return REGISTRY.get_sample_value(
        "paygate_payment_total",
        {"provider": "observed", "kind": "single_payment", "outcome": outcome},
    ) or 0.0


def test_metric_sink_counts_outcomes(caplog):
    sink = PrometheusMetricSink()
    before_ok, before_failed = sample("succeeded"), sample("DoTransactionError")

    with caplog.at_level(logging.INFO):
        sink.publish(PaymentMetricEvent("observed", "single_payment", 100, "t-1", None, 120))
        sink.publish(PaymentMetricEvent("observed", "single_payment", 100, "t-1", "DoTransactionError", 80))

    assert sample("succeeded") == before_ok + 1
    assert sample("DoTransactionError") == before_failed + 1
    outcomes = [r.payment_outcome for r in caplog.records if r.getMessage() == "Payment attempt completed"]
    assert outcomes == ["succeeded", "DoTransactionError"]


def test_json_formatter_adds_service_fields():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name="paygate-test")
    record = logging.LogRecord("paygate.cards", logging.CRITICAL, __file__, 1, "Card unbind failed", None, None)
    record.card_id = 10

    data = json.loads(formatter.format(record))

    assert data["message"] == "Card unbind failed"
    assert data["level"] == "CRITICAL"
    assert data["service"] == "paygate-test"
    assert data["card_id"] == 10
    assert data["timestamp"]
