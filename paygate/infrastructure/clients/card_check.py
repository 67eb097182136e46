"""Card check service client - payout eligibility by card mask"""

from typing import Any, Dict

import httpx

from paygate.config import settings
from paygate.domain.exceptions import BlockedPayoutByCardError, CardCheckError
from paygate.infrastructure.observability.metrics import card_check_failures_counter


class CardCheckClient:
    """Client for the external card check service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.card_check_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def check_payout(self, mask: str, context: Dict[str, Any]) -> None:
        """
        Ask whether payouts to the card are allowed.

        Raises:
            BlockedPayoutByCardError: Service answered ``allowed: false``
            CardCheckError: On timeout, HTTP errors, or invalid response
        """
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.post(
                    f"{self.base_url}/check/payout",
                    json={"mask": mask, "context": context},
                )
                response.raise_for_status()
                allowed = response.json()["allowed"]
            except httpx.TimeoutException as e:
                card_check_failures_counter.inc()
                raise CardCheckError(f"Card check timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                card_check_failures_counter.inc()
                raise CardCheckError(f"Card check error: {e.response.status_code}") from e
            except (httpx.RequestError, KeyError, ValueError, TypeError) as e:
                card_check_failures_counter.inc()
                raise CardCheckError(f"Invalid card check response: {e}") from e

        if not allowed:
            raise BlockedPayoutByCardError(mask)
