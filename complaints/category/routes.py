# complaints/category/routes.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from complaints.access.policy import Action, require
from complaints.category import services as category_service
from complaints.category.schemas import CategoryCreate, CategoryDetail, CategoryOut, CategoryUpdate
from complaints.core.database import get_db
from complaints.core.security import Principal

router = APIRouter(prefix="/categories", tags=["Categories"])


# Public
@router.get("/", response_model=list[CategoryOut])
def list_all(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryDetail)
def get(category_id: int, db: Session = Depends(get_db)):
    return category_service.get_category(db, category_id)


# Admin only
@router.post("/", response_model=CategoryOut, status_code=201)
def create(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_CATEGORIES)),
):
    return category_service.create_category(db, principal, category)


@router.put("/{category_id}", response_model=CategoryOut)
def update(
    category_id: int,
    category: CategoryUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_CATEGORIES)),
):
    return category_service.update_category(db, principal, category_id, category)


@router.delete("/{category_id}", status_code=204)
def delete(
    category_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_CATEGORIES)),
):
    category_service.delete_category(db, principal, category_id)
    return Response(status_code=204)
