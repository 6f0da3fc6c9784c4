"""Company profile endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_company_profile import company_profile_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, get_current_principal, require_capability
from backend.app.schemas.company_profile import CompanyProfileCreate, CompanyProfileRead, CompanyProfileUpdate

router = APIRouter(prefix="/company-profiles", tags=["company_profiles"])

manage_profiles = require_capability("can_manage_company_profiles")


@router.get("", response_model=List[CompanyProfileRead])
def list_company_profiles(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return company_profile_crud.get_multi(db, owner_id=principal.owner_id)


@router.post("", response_model=CompanyProfileRead, status_code=status.HTTP_201_CREATED)
def create_company_profile(
    profile_in: CompanyProfileCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_profiles),
):
    return company_profile_crud.create(db, obj_in=profile_in, owner_id=principal.owner_id)


@router.get("/{profile_id}", response_model=CompanyProfileRead)
def get_company_profile(profile_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return company_profile_crud.get_or_404(db, obj_id=profile_id, owner_id=principal.owner_id)


@router.put("/{profile_id}", response_model=CompanyProfileRead)
def update_company_profile(
    profile_id: int,
    profile_in: CompanyProfileUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_profiles),
):
    profile = company_profile_crud.get_or_404(db, obj_id=profile_id, owner_id=principal.owner_id)
    return company_profile_crud.update(db, db_obj=profile, obj_in=profile_in)


@router.delete("/{profile_id}")
def delete_company_profile(profile_id: int, db: Session = Depends(get_db), principal: Principal = Depends(manage_profiles)):
    if not company_profile_crud.delete(db, obj_id=profile_id, owner_id=principal.owner_id):
        raise NotFoundError("Company profile not found")
    return {"success": True}
