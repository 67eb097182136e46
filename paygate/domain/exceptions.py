"""Domain-specific exceptions"""


class GatewayError(Exception):
    """Base exception for the payment gateway"""

    pass


class CompanyNotFoundError(GatewayError):
    """No company is registered under the alias"""

    def __init__(self, alias: str):
        super().__init__(f"Company '{alias}' not found")
        self.alias = alias


class GatewayCompanyNotFoundError(CompanyNotFoundError):
    """Company lookup failed while serving a payment gateway request"""

    pass


class MethodsNotFoundError(GatewayError):
    """Company has no payment methods for the direction"""

    def __init__(self, alias: str, direction: str):
        super().__init__(f"No {direction} methods for company '{alias}'")
        self.alias = alias
        self.direction = direction


class MethodCompanyNotFoundError(GatewayError):
    """No method is bound to the company/provider pair for the direction"""

    pass


class ProviderNotFoundError(GatewayError):
    """No provider adapter or integration config applies to the request"""

    pass


class BadRuleError(GatewayError):
    """Integration rule definitions are malformed or contradict each other"""

    pass


class IntegrationNotFoundError(GatewayError):
    """No integration rule matched the search criteria"""

    pass


class InvalidServiceTypeError(GatewayError):
    """Service type tag is not one the router knows"""

    def __init__(self, service_type: str):
        super().__init__(f"Invalid service type '{service_type}'")
        self.service_type = service_type


class BankCardNotFoundError(GatewayError):
    """Bank card is missing or cannot be used for the operation"""

    pass


class TransactionNotFoundError(GatewayError):
    """Transaction does not exist"""

    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


class PayoutRejectedError(GatewayError):
    """Payout refused before a transaction was created"""

    OWNERSHIP = "ownership"
    ELIGIBILITY = "eligibility"

    def __init__(self, message: str, reason: str = OWNERSHIP):
        super().__init__(message)
        self.reason = reason


class BlockedPayoutByCardError(PayoutRejectedError):
    """Card check service forbids payouts to the card"""

    def __init__(self, mask: str):
        super().__init__(f"Payouts to card {mask} are blocked", reason=PayoutRejectedError.ELIGIBILITY)
        self.mask = mask


class CardCheckError(GatewayError):
    """Card check service failed or returned an unusable answer"""

    pass


class InvalidReceiptError(GatewayError):
    """Receipt payload cannot be parsed"""

    pass


class AdapterError(GatewayError):
    """Payment provider call failed"""

    kind = "payment"


class PaymentAdapterError(AdapterError):
    kind = "payment"


class DoTransactionError(PaymentAdapterError):
    """Provider rejected or could not register the payment"""

    pass


class PayoutAdapterError(AdapterError):
    kind = "payout"


class RecurrentPaymentAdapterError(AdapterError):
    kind = "recurrent"


class BindCardAdapterError(AdapterError):
    kind = "bind"


class UnbindCardAdapterError(AdapterError):
    kind = "unbind"


class InvalidCardError(UnbindCardAdapterError):
    """Provider no longer knows the card reference"""

    pass


class GeneralGatewayError(GatewayError):
    """Wraps any failure at the card bind/unbind boundary"""

    pass
