"""Bank card lifecycle - listing, binding and removal"""

import logging
import traceback
from typing import Any, Dict, List, Optional

from paygate.domain.exceptions import (
    BankCardNotFoundError,
    BlockedPayoutByCardError,
    GeneralGatewayError,
    InvalidCardError,
)
from paygate.domain.integration import IntegrationConfigResolver
from paygate.domain.models import (
    BankCard,
    BankCardView,
    CardBindingResult,
    CardType,
    UnbindCardMeta,
)
from paygate.domain.ports import (
    BankCardStore,
    CardEligibilityChecker,
    IntegrationConfigStore,
    ProviderRegistry,
)
from paygate.domain.requests import CardBindingRequest


class CardLifecycleManager:
    def __init__(
        self,
        cards: BankCardStore,
        card_checker: CardEligibilityChecker,
        providers: ProviderRegistry,
        configs: IntegrationConfigResolver,
        config_store: IntegrationConfigStore,
        card_provider_alias: str,
        bind_company_alias: str,
        unbind_config_type: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.cards = cards
        self.card_checker = card_checker
        self.providers = providers
        self.configs = configs
        self.config_store = config_store
        self.card_provider_alias = card_provider_alias
        self.bind_company_alias = bind_company_alias
        self.unbind_config_type = unbind_config_type
        self.logger = logger or logging.getLogger(__name__)

    def list_cards(
        self,
        client_id: int,
        card_type: CardType,
        check_context: Optional[Dict[str, Any]] = None,
    ) -> List[BankCardView]:
        """
        List a client's cards of one type.

        - Recurrent cards: one per mask, the last one fetched wins
        - Payout cards with a check context: cards blocked for payouts are dropped

        Raises:
            CardCheckError: Card check failed for a reason other than a block
        """
        cards = self.cards.by_client_and_type(client_id, card_type)

        if card_type is CardType.RECURRENT:
            unique: Dict[str, BankCard] = {}
            for card in cards:
                unique[card.number_mask] = card
            cards = list(unique.values())

        if card_type is CardType.PAYOUT and check_context is not None:
            cards = [card for card in cards if self._payout_allowed(card, check_context)]

        return [
            BankCardView(
                id=card.id,
                exp_year=card.expire_date.year % 100,
                exp_month=card.expire_date.month,
                number_mask=card.number_mask,
                is_recurrent=bool(card.is_recurrent),
            )
            for card in cards
        ]

    def _payout_allowed(self, card: BankCard, check_context: Dict[str, Any]) -> bool:
        try:
            self.card_checker.check_payout(card.number_mask, check_context)
        except BlockedPayoutByCardError:
            return False
        return True

    def bind_card(self, request: CardBindingRequest) -> CardBindingResult:
        """
        Request a card binding page from the card provider.

        Raises:
            GeneralGatewayError: Any failure while resolving or calling the provider
        """
        try:
            provider = self.providers.get(self.card_provider_alias)
            config = self.configs.resolve({"action": "bindCard", "company": self.bind_company_alias})
            url = provider.get_bind_url(request.client_id, config, request.email, request.phone)
        except Exception as e:
            raise GeneralGatewayError(str(e)) from e

        return CardBindingResult(type=CardBindingResult.TYPE_FRAME, data={"url": url})

    def remove_card(self, card_id: int) -> None:
        """
        Unbind a payout card at the provider, then delete it.

        The card is unbound with the config of its bind record, or with the
        default unbind config when it was never bound through us. Without
        either config the provider is not called. A provider that no longer
        knows the card does not stop the removal.

        Raises:
            BankCardNotFoundError: Card missing or not a payout card
            GeneralGatewayError: Provider failed; the card is kept
        """
        card = self.cards.by_id(card_id)
        if card is None or card.type is not CardType.PAYOUT:
            raise BankCardNotFoundError(f"Bank card {card_id} not found")

        try:
            provider = self.providers.get(self.card_provider_alias)
            meta = self._unbind_meta(card)
            if meta is not None:
                provider.unbind_card(card, meta)
        except InvalidCardError:
            self.logger.info("Card already unknown to provider", extra={"card_id": card.id})
        except Exception as e:
            self.logger.critical(
                "Card unbind failed",
                extra={
                    "card_id": card.id,
                    "exception": {
                        "name": type(e).__name__,
                        "message": str(e),
                        "trace": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
                    },
                },
            )
            raise GeneralGatewayError(str(e)) from e

        self.cards.remove(card)
        self.logger.info("Card removed", extra={"card_id": card.id, "client_id": card.client_id})

    def _unbind_meta(self, card: BankCard) -> Optional[UnbindCardMeta]:
        if card.bind_card is not None:
            return UnbindCardMeta(card.bind_card.integration_config)

        config = self.config_store.by_config_type(self.unbind_config_type)
        if config is None:
            return None
        return UnbindCardMeta(config)
