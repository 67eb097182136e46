"""Routing of service-context payments to the loan and option services"""

from enum import Enum

from paygate.domain.exceptions import InvalidServiceTypeError
from paygate.domain.methods import MethodListing
from paygate.domain.models import MethodList
from paygate.domain.ports import ServicePaymentHandler
from paygate.domain.requests import ContextMethodsRequest, CreatePaymentRequest, CreatePaymentResponse


class ServiceType(str, Enum):
    LOAN = "loan"
    OPTION = "option"


class PaymentRouter:
    def __init__(
        self,
        loan_service: ServicePaymentHandler,
        option_service: ServicePaymentHandler,
        methods: MethodListing,
    ):
        self.handlers = {
            ServiceType.LOAN: loan_service,
            ServiceType.OPTION: option_service,
        }
        self.methods = methods

    def create_payment(self, request: CreatePaymentRequest) -> CreatePaymentResponse:
        return self._handler(request.service_type).create_payment(request)

    def get_context_methods(self, request: ContextMethodsRequest) -> MethodList:
        """Let the owning service name company and direction, then list methods"""
        methods_request = self._handler(request.service_type).build_methods_request(request)
        return self.methods.get_methods(
            methods_request.company_alias,
            methods_request.direction,
            request.platform,
        )

    def _handler(self, service_type: str) -> ServicePaymentHandler:
        try:
            return self.handlers[ServiceType(service_type)]
        except ValueError as e:
            raise InvalidServiceTypeError(service_type) from e
