# complaints/category/services.py
import logging

from sqlalchemy.orm import Session

from complaints.access.policy import Action, authorize
from complaints.category.models import Category
from complaints.category.schemas import CategoryCreate, CategoryDetail, CategoryUpdate
from complaints.core.errors import ConflictError, NotFoundError
from complaints.core.security import Principal
from complaints.ticket.models import Ticket

logger = logging.getLogger(__name__)


def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(Category).filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first() is not None:
        raise ConflictError(f"Category '{name}' already exists", field="name")


def _get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def ticket_count(db: Session, category_id: int) -> int:
    return db.query(Ticket).filter(Ticket.category_id == category_id).count()


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def get_category(db: Session, category_id: int) -> CategoryDetail:
    category = _get_category_or_404(db, category_id)
    detail = CategoryDetail.model_validate(category)
    detail.ticket_count = ticket_count(db, category.id)
    return detail


def create_category(db: Session, principal: Principal, payload: CategoryCreate) -> Category:
    authorize(principal, Action.MANAGE_CATEGORIES)
    _ensure_unique_name(db, payload.name)
    category = Category(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category %r created", category.name)
    return category


def update_category(
    db: Session, principal: Principal, category_id: int, payload: CategoryUpdate
) -> Category:
    authorize(principal, Action.MANAGE_CATEGORIES)
    category = _get_category_or_404(db, category_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name"):
        _ensure_unique_name(db, changes["name"], exclude_id=category.id)
    for field, value in changes.items():
        if value is None and field != "description":
            continue
        setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, principal: Principal, category_id: int) -> None:
    authorize(principal, Action.MANAGE_CATEGORIES)
    category = _get_category_or_404(db, category_id)
    count = ticket_count(db, category.id)
    if count > 0:
        raise ConflictError(
            f"Cannot delete category. It has {count} ticket(s) associated with it. "
            "Please reassign or delete those tickets first."
        )
    db.delete(category)
    db.commit()
    logger.info("Category %r deleted", category.name)
