"""Company and method-company resolution"""

from paygate.domain.exceptions import MethodCompanyNotFoundError
from paygate.domain.models import CompanyView, Direction, MethodCompany
from paygate.domain.ports import CompanyDirectory, MethodCompanyCatalog


class CompanyService:
    def __init__(self, directory: CompanyDirectory):
        self.directory = directory

    def get_company_by_alias(self, alias: str) -> CompanyView:
        company = self.directory.by_alias(alias)
        return CompanyView(id=company.id, alias=company.alias, name=company.name)


class MethodCompanyResolver:
    """Finds the method a company offers through a provider in one direction"""

    def __init__(self, catalog: MethodCompanyCatalog):
        self.catalog = catalog

    def resolve(
        self,
        company_alias: str,
        method_alias: str,
        provider_alias: str,
        direction: Direction,
    ) -> MethodCompany:
        """
        Exact lookup on all four keys.

        Raises:
            MethodCompanyNotFoundError: No binding matches
        """
        method_company = self.catalog.find(company_alias, method_alias, provider_alias, direction)
        if method_company is None:
            raise MethodCompanyNotFoundError(
                f"No {direction.value} method '{method_alias}' via '{provider_alias}' "
                f"for company '{company_alias}'"
            )
        return method_company
