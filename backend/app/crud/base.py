"""Owner-scoped CRUD shared by every store."""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError, StorageUnavailableError, ValidationError
from backend.app.db.base_class import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def commit_or_raise(db: Session, conflict: Type[ConflictError] = ConflictError, conflict_detail: str | None = None) -> None:
    """Commit the session, translating driver errors into domain errors."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise conflict(conflict_detail) from exc
    except OperationalError as exc:
        db.rollback()
        logger.error("Record store unavailable: %s", exc.orig)
        raise StorageUnavailableError() from exc


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    not_found_detail = "Not found"

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def create(self, db: Session, *, obj_in: CreateSchemaType, owner_id: int) -> ModelType:
        obj = self.model(owner_id=owner_id, **obj_in.model_dump())
        db.add(obj)
        commit_or_raise(db)
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, obj_id: int, owner_id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == obj_id, self.model.owner_id == owner_id).first()

    def get_or_404(self, db: Session, *, obj_id: int, owner_id: int) -> ModelType:
        obj = self.get(db, obj_id=obj_id, owner_id=owner_id)
        if obj is None:
            raise NotFoundError(self.not_found_detail)
        return obj

    def get_multi(self, db: Session, *, owner_id: int) -> List[ModelType]:
        return (
            db.query(self.model)
            .filter(self.model.owner_id == owner_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )

    def update(self, db: Session, *, db_obj: ModelType, obj_in: UpdateSchemaType | dict[str, Any]) -> ModelType:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        columns = self.model.__table__.columns
        for field, value in update_data.items():
            if value is None and field in columns and not columns[field].nullable:
                raise ValidationError(f"{field} cannot be empty")
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        commit_or_raise(db)
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, obj_id: int, owner_id: int) -> bool:
        obj = self.get(db, obj_id=obj_id, owner_id=owner_id)
        if obj is None:
            return False
        db.delete(obj)
        commit_or_raise(db)
        return True
