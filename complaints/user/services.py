# complaints/user/services.py
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from complaints.access.policy import Action, authorize
from complaints.core.errors import ConflictError, NotFoundError, UnauthenticatedError, ValidationError
from complaints.core.security import Principal, create_access_token, hash_password, verify_password
from complaints.ticket.models import Ticket
from complaints.user.models import Role, User
from complaints.user.schemas import LoginIn, RegisterIn, UserRoleUpdate, UserWithCounts

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Role = Role.STUDENT,
    identification: str | None = None,
    department: str | None = None,
) -> User:
    if get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered", field="email")
    user = User(
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=Role(role).value,
        identification=identification,
        department=department,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register(db: Session, payload: RegisterIn) -> tuple[User, str]:
    # self-registration never grants elevated roles
    user = create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        identification=payload.identification,
        department=payload.department,
    )
    logger.info("User %s registered", user.id)
    return user, create_access_token(user)


def login(db: Session, payload: LoginIn) -> tuple[User, str]:
    user = get_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise UnauthenticatedError("Invalid email or password")
    return user, create_access_token(user)


def get_profile(db: Session, principal: Principal) -> User:
    user = db.get(User, principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session, principal: Principal) -> list[UserWithCounts]:
    authorize(principal, Action.MANAGE_USERS)
    authored = dict(
        db.query(Ticket.author_id, func.count(Ticket.id)).group_by(Ticket.author_id).all()
    )
    assigned = dict(
        db.query(Ticket.assigned_to_id, func.count(Ticket.id))
        .filter(Ticket.assigned_to_id.isnot(None))
        .group_by(Ticket.assigned_to_id)
        .all()
    )
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    result = []
    for user in users:
        item = UserWithCounts.model_validate(user)
        item.authored_ticket_count = authored.get(user.id, 0)
        item.assigned_ticket_count = assigned.get(user.id, 0)
        result.append(item)
    return result


def update_user_role(
    db: Session, principal: Principal, user_id: int, payload: UserRoleUpdate
) -> User:
    authorize(principal, Action.MANAGE_USERS)
    try:
        role = Role(payload.role)
    except ValueError:
        raise ValidationError("Invalid role", field="role")

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    user.role = role.value
    if "department" in payload.model_fields_set:
        user.department = payload.department
    db.commit()
    db.refresh(user)
    logger.info("User %s role set to %s by user %s", user.id, user.role, principal.user_id)
    return user
