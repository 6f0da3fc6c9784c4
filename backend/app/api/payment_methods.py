"""Payment method endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_payment_method import payment_method_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, get_current_principal, require_capability
from backend.app.schemas.payment_method import (
    PaymentMethodCreate,
    PaymentMethodPreset,
    PaymentMethodRead,
    PaymentMethodUpdate,
)
from backend.app.services.presets import payment_method_presets

router = APIRouter(prefix="/payment-methods", tags=["payment_methods"])

manage_payment_methods = require_capability("can_manage_payment_methods")


@router.get("/presets", response_model=List[PaymentMethodPreset])
def list_payment_method_presets():
    return payment_method_presets()


@router.get("", response_model=List[PaymentMethodRead])
def list_payment_methods(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return payment_method_crud.get_multi(db, owner_id=principal.owner_id)


@router.post("", response_model=PaymentMethodRead, status_code=status.HTTP_201_CREATED)
def create_payment_method(
    method_in: PaymentMethodCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_payment_methods),
):
    return payment_method_crud.create(db, obj_in=method_in, owner_id=principal.owner_id)


@router.get("/{method_id}", response_model=PaymentMethodRead)
def get_payment_method(method_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return payment_method_crud.get_or_404(db, obj_id=method_id, owner_id=principal.owner_id)


@router.put("/{method_id}", response_model=PaymentMethodRead)
def update_payment_method(
    method_id: int,
    method_in: PaymentMethodUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_payment_methods),
):
    method = payment_method_crud.get_or_404(db, obj_id=method_id, owner_id=principal.owner_id)
    return payment_method_crud.update(db, db_obj=method, obj_in=method_in)


@router.delete("/{method_id}")
def delete_payment_method(method_id: int, db: Session = Depends(get_db), principal: Principal = Depends(manage_payment_methods)):
    if not payment_method_crud.delete(db, obj_id=method_id, owner_id=principal.owner_id):
        raise NotFoundError("Payment method not found")
    return {"success": True}
