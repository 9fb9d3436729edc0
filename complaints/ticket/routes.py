# complaints/ticket/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from complaints.access.policy import Action, require
from complaints.core.database import get_db
from complaints.core.security import Principal, get_current_principal
from complaints.ticket import services as ticket_service
from complaints.ticket.models import TicketPriority, TicketStatus
from complaints.ticket.schemas import (
    RemarkCreate,
    RemarkOut,
    TicketCreate,
    TicketDetail,
    TicketOut,
    TicketUpdate,
)

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("/", response_model=TicketOut, status_code=201)
def create(
    ticket: TicketCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return ticket_service.create_ticket(db, principal, ticket)


@router.get("/", response_model=list[TicketOut])
def list_all(
    status: TicketStatus | None = Query(default=None, description="Filter by status"),
    priority: TicketPriority | None = Query(default=None, description="Filter by priority"),
    category_id: int | None = Query(default=None, description="Filter by category"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return ticket_service.list_tickets(
        db, principal, status=status, priority=priority, category_id=category_id
    )


@router.get("/{ticket_id}", response_model=TicketDetail)
def get(
    ticket_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return ticket_service.get_ticket(db, principal, ticket_id)


@router.put("/{ticket_id}", response_model=TicketOut)
def update(
    ticket_id: int,
    ticket: TicketUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.UPDATE_TICKET)),
):
    return ticket_service.update_ticket(db, principal, ticket_id, ticket)


@router.post("/{ticket_id}/remarks", response_model=RemarkOut, status_code=201)
def add_remark(
    ticket_id: int,
    remark: RemarkCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return ticket_service.add_remark(db, principal, ticket_id, remark)
