"""CRUD operations for payment methods."""

from backend.app.crud.base import CRUDBase
from backend.app.models.payment_method import PaymentMethod
from backend.app.schemas.payment_method import PaymentMethodCreate, PaymentMethodUpdate


class CRUDPaymentMethod(CRUDBase[PaymentMethod, PaymentMethodCreate, PaymentMethodUpdate]):
    not_found_detail = "Payment method not found"


payment_method_crud = CRUDPaymentMethod(PaymentMethod)
