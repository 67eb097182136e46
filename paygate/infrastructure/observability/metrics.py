"""Prometheus metrics for payment attempts and HTTP traffic"""

import logging
from typing import Optional

from prometheus_client import Counter, Histogram

from paygate.domain.models import PaymentMetricEvent
from paygate.infrastructure.observability.logging import log_payment_attempt

# Payment metrics
payment_counter = Counter(
    "paygate_payment_total",
    "Payment attempts by provider and outcome",
    ["provider", "kind", "outcome"],  # outcome: succeeded | exception class name
)

payment_duration_histogram = Histogram(
    "paygate_payment_duration_seconds",
    "Payment creation time including the provider call",
    ["provider", "kind"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Card check metrics
card_check_failures_counter = Counter(
    "paygate_card_check_failures_total",
    "Failed card check service calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


class PrometheusMetricSink:
    """Publishes payment metric events; never raises into the caller"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def publish(self, event: PaymentMetricEvent) -> None:
        try:
            payment_counter.labels(
                provider=event.provider_alias,
                kind=event.kind,
                outcome=event.exception or "succeeded",
            ).inc()
            payment_duration_histogram.labels(
                provider=event.provider_alias,
                kind=event.kind,
            ).observe(event.duration_ms / 1000)
        except Exception as e:
            self.logger.warning("Payment metric not recorded", extra={"error": str(e)})

        log_payment_attempt(self.logger, event)
