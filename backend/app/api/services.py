"""Service catalog endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_service import service_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, get_current_principal, require_capability
from backend.app.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate

router = APIRouter(prefix="/services", tags=["services"])

manage_services = require_capability("can_manage_services")


@router.get("", response_model=List[ServiceRead])
def list_services(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return service_crud.get_multi(db, owner_id=principal.owner_id)


@router.post("", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
def create_service(
    service_in: ServiceCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_services),
):
    return service_crud.create(db, obj_in=service_in, owner_id=principal.owner_id)


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(service_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return service_crud.get_or_404(db, obj_id=service_id, owner_id=principal.owner_id)


@router.put("/{service_id}", response_model=ServiceRead)
def update_service(
    service_id: int,
    service_in: ServiceUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_services),
):
    service = service_crud.get_or_404(db, obj_id=service_id, owner_id=principal.owner_id)
    # Existing invoices keep their snapshot; only future lines see the new price
    return service_crud.update(db, db_obj=service, obj_in=service_in)


@router.delete("/{service_id}")
def delete_service(service_id: int, db: Session = Depends(get_db), principal: Principal = Depends(manage_services)):
    if not service_crud.delete(db, obj_id=service_id, owner_id=principal.owner_id):
        raise NotFoundError("Service not found")
    return {"success": True}
