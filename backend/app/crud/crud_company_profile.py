"""CRUD operations for company profiles."""

from backend.app.crud.base import CRUDBase
from backend.app.models.company_profile import CompanyProfile
from backend.app.schemas.company_profile import CompanyProfileCreate, CompanyProfileUpdate


class CRUDCompanyProfile(CRUDBase[CompanyProfile, CompanyProfileCreate, CompanyProfileUpdate]):
    not_found_detail = "Company profile not found"


company_profile_crud = CRUDCompanyProfile(CompanyProfile)
