"""CRUD operations for catalog packages."""

from backend.app.crud.base import CRUDBase
from backend.app.models.package import Package
from backend.app.schemas.package import PackageCreate, PackageUpdate


class CRUDPackage(CRUDBase[Package, PackageCreate, PackageUpdate]):
    not_found_detail = "Package not found"


package_crud = CRUDPackage(Package)
