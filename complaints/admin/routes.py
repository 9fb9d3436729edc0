# complaints/admin/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from complaints.access.policy import Action, require
from complaints.admin import services as admin_service
from complaints.admin.schemas import DashboardStats
from complaints.core.database import get_db
from complaints.core.security import Principal
from complaints.user import services as user_service
from complaints.user.schemas import UserBrief, UserRoleUpdate, UserWithCounts

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.VIEW_DASHBOARD)),
):
    return admin_service.get_dashboard_stats(db, principal)


@router.get("/users", response_model=list[UserWithCounts])
def users(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_USERS)),
):
    return user_service.list_users(db, principal)


@router.put("/users/{user_id}/role", response_model=UserBrief)
def update_role(
    user_id: int,
    payload: UserRoleUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_USERS)),
):
    return user_service.update_user_role(db, principal, user_id, payload)
