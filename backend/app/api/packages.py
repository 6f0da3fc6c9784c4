"""Package (service bundle) endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_package import package_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, get_current_principal, require_capability
from backend.app.schemas.package import PackageCreate, PackageRead, PackageUpdate

router = APIRouter(prefix="/packages", tags=["packages"])


@router.get("", response_model=List[PackageRead])
def list_packages(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return package_crud.get_multi(db, owner_id=principal.owner_id)


@router.post("", response_model=PackageRead, status_code=status.HTTP_201_CREATED)
def create_package(
    package_in: PackageCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_services")),
):
    return package_crud.create(db, obj_in=package_in, owner_id=principal.owner_id)


@router.get("/{package_id}", response_model=PackageRead)
def get_package(package_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return package_crud.get_or_404(db, obj_id=package_id, owner_id=principal.owner_id)


@router.put("/{package_id}", response_model=PackageRead)
def update_package(
    package_id: int,
    package_in: PackageUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_services")),
):
    package = package_crud.get_or_404(db, obj_id=package_id, owner_id=principal.owner_id)
    return package_crud.update(db, db_obj=package, obj_in=package_in)


@router.delete("/{package_id}")
def delete_package(
    package_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_services")),
):
    if not package_crud.delete(db, obj_id=package_id, owner_id=principal.owner_id):
        raise NotFoundError("Package not found")
    return {"success": True}
