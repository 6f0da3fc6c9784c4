"""CRUD operations for team members."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.core.security import get_password_hash
from backend.app.crud.base import commit_or_raise
from backend.app.models.team_member import TeamMember
from backend.app.models.user import User
from backend.app.schemas.team_member import TeamMemberCreate, TeamMemberUpdate


def email_taken(db: Session, email: str, *, exclude_member_id: int | None = None) -> bool:
    """Emails identify logins, so they must be unique across accounts and team members."""
    if db.query(User).filter(User.email == email).first():
        return True
    query = db.query(TeamMember).filter(TeamMember.email == email)
    if exclude_member_id is not None:
        query = query.filter(TeamMember.id != exclude_member_id)
    return query.first() is not None


class CRUDTeamMember:
    def create(self, db: Session, *, obj_in: TeamMemberCreate, admin_id: int) -> TeamMember:
        if email_taken(db, obj_in.email):
            raise ConflictError("Email already registered")
        data = obj_in.model_dump(exclude={"password"})
        member = TeamMember(admin_id=admin_id, hashed_password=get_password_hash(obj_in.password), **data)
        db.add(member)
        commit_or_raise(db, conflict_detail="Email already registered")
        db.refresh(member)
        return member

    def get(self, db: Session, *, member_id: int, admin_id: int) -> Optional[TeamMember]:
        return db.query(TeamMember).filter(TeamMember.id == member_id, TeamMember.admin_id == admin_id).first()

    def get_or_404(self, db: Session, *, member_id: int, admin_id: int) -> TeamMember:
        member = self.get(db, member_id=member_id, admin_id=admin_id)
        if member is None:
            raise NotFoundError("Team member not found")
        return member

    def get_multi(self, db: Session, *, admin_id: int) -> List[TeamMember]:
        return (
            db.query(TeamMember)
            .filter(TeamMember.admin_id == admin_id)
            .order_by(TeamMember.created_at.desc(), TeamMember.id.desc())
            .all()
        )

    def update(self, db: Session, *, db_obj: TeamMember, obj_in: TeamMemberUpdate) -> TeamMember:
        update_data = obj_in.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)
        if password:
            db_obj.hashed_password = get_password_hash(password)
        email = update_data.get("email")
        if email and email != db_obj.email and email_taken(db, email, exclude_member_id=db_obj.id):
            raise ConflictError("Email already registered")
        for field, value in update_data.items():
            if value is not None:
                setattr(db_obj, field, value)
        commit_or_raise(db, conflict_detail="Email already registered")
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, member_id: int, admin_id: int) -> bool:
        member = self.get(db, member_id=member_id, admin_id=admin_id)
        if member is None:
            return False
        db.delete(member)
        commit_or_raise(db)
        return True


team_member_crud = CRUDTeamMember()
