"""CRUD operations for catalog services."""

from backend.app.crud.base import CRUDBase
from backend.app.models.service import Service
from backend.app.schemas.service import ServiceCreate, ServiceUpdate


class CRUDService(CRUDBase[Service, ServiceCreate, ServiceUpdate]):
    not_found_detail = "Service not found"


service_crud = CRUDService(Service)
