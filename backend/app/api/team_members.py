"""Team member management for account owners and delegated managers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_team_member import team_member_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, require_capability
from backend.app.schemas.team_member import TeamMemberCreate, TeamMemberRead, TeamMemberUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team-members", tags=["team_members"])

manage_team = require_capability("can_manage_team_members")


@router.get("", response_model=List[TeamMemberRead])
def list_team_members(db: Session = Depends(get_db), principal: Principal = Depends(manage_team)):
    return team_member_crud.get_multi(db, admin_id=principal.owner_id)


@router.post("", response_model=TeamMemberRead, status_code=status.HTTP_201_CREATED)
def create_team_member(
    member_in: TeamMemberCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_team),
):
    member = team_member_crud.create(db, obj_in=member_in, admin_id=principal.owner_id)
    logger.info("Owner %s added team member %s", principal.owner_id, member.id)
    return member


@router.get("/{member_id}", response_model=TeamMemberRead)
def get_team_member(member_id: int, db: Session = Depends(get_db), principal: Principal = Depends(manage_team)):
    return team_member_crud.get_or_404(db, member_id=member_id, admin_id=principal.owner_id)


@router.put("/{member_id}", response_model=TeamMemberRead)
def update_team_member(
    member_id: int,
    member_in: TeamMemberUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(manage_team),
):
    member = team_member_crud.get_or_404(db, member_id=member_id, admin_id=principal.owner_id)
    return team_member_crud.update(db, db_obj=member, obj_in=member_in)


@router.delete("/{member_id}")
def delete_team_member(member_id: int, db: Session = Depends(get_db), principal: Principal = Depends(manage_team)):
    if not team_member_crud.delete(db, member_id=member_id, admin_id=principal.owner_id):
        raise NotFoundError("Team member not found")
    logger.info("Owner %s removed team member %s", principal.owner_id, member_id)
    return {"success": True}
