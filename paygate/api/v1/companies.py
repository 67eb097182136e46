"""GET /v1/companies/{alias} and its method listing"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from paygate.api.dependencies import get_company_service, get_method_listing
from paygate.api.v1.schemas import CompanyResponse, MethodListResponse
from paygate.domain.companies import CompanyService
from paygate.domain.methods import MethodListing
from paygate.domain.models import Direction

router = APIRouter()


@router.get("/companies/{alias}", response_model=CompanyResponse)
def get_company_by_alias(alias: str, companies: CompanyService = Depends(get_company_service)):
    return CompanyResponse(**asdict(companies.get_company_by_alias(alias)))


@router.get("/companies/{alias}/methods", response_model=MethodListResponse)
def get_methods(
    alias: str,
    direction: Direction = Query(..., description="income or outcome"),
    platform: Optional[str] = Query(None, description="Client platform, e.g. ios, android, web"),
    listing: MethodListing = Depends(get_method_listing),
):
    """
    List payment methods a company offers in one direction.

    Methods restricted to other platforms are left out when a platform is given.
    """
    return MethodListResponse(**asdict(listing.get_methods(alias, direction, platform)))
