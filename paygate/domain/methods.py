"""Payment method listing per company and platform"""

from typing import Optional

from paygate.domain.exceptions import (
    CompanyNotFoundError,
    GatewayCompanyNotFoundError,
    MethodsNotFoundError,
)
from paygate.domain.models import Direction, MethodList, MethodView
from paygate.domain.ports import CompanyDirectory, MethodCatalog


class MethodListing:
    def __init__(self, directory: CompanyDirectory, catalog: MethodCatalog):
        self.directory = directory
        self.catalog = catalog

    def get_methods(
        self,
        company_alias: str,
        direction: Direction,
        platform: Optional[str] = None,
    ) -> MethodList:
        """
        List methods a company offers in a direction.

        Methods limited to other platforms are left out; an empty listing after
        filtering is still a valid answer.

        Raises:
            GatewayCompanyNotFoundError: Unknown company alias
            MethodsNotFoundError: Company has no methods for the direction
        """
        try:
            company = self.directory.by_alias(company_alias)
        except CompanyNotFoundError as e:
            raise GatewayCompanyNotFoundError(company_alias) from e

        methods = self.catalog.by_company_and_direction(company.alias, direction)
        if not methods:
            raise MethodsNotFoundError(company_alias, direction.value)

        available = sorted(
            (m for m in methods if m.available_on(platform)),
            key=lambda m: m.position,
        )
        return MethodList(
            methods=[
                MethodView(alias=m.alias, name=m.name, provider_alias=m.provider_alias)
                for m in available
            ]
        )
