# complaints/ticket/services.py
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from complaints.access.policy import Action, authorize, can_see_internal, is_assignable, scope_tickets
from complaints.category.models import Category
from complaints.core.config import Settings, get_settings
from complaints.core.database import utcnow
from complaints.core.errors import ConflictError, NotFoundError, StoreError, ValidationError
from complaints.core.security import Principal
from complaints.notification.services import Notifier
from complaints.ticket import ticket_id as ticket_ids
from complaints.ticket.models import Remark, Ticket, TicketPriority, TicketStatus
from complaints.ticket.schemas import RemarkCreate, TicketCreate, TicketDetail, TicketOut, TicketUpdate
from complaints.user.models import User

logger = logging.getLogger(__name__)


def _touch(ticket: Ticket, now: datetime) -> None:
    # strictly later than the previous write, even within one clock tick
    if ticket.updated_at is not None and now <= ticket.updated_at:
        now = ticket.updated_at + timedelta(microseconds=1)
    ticket.updated_at = now


def _ticket_link(ticket: Ticket) -> str:
    return f"/tickets/{ticket.id}"


def _get_ticket_or_404(db: Session, ticket_pk: int) -> Ticket:
    ticket = db.get(Ticket, ticket_pk)
    if ticket is None:
        raise NotFoundError("Ticket not found")
    return ticket


def create_ticket(
    db: Session,
    principal: Principal,
    payload: TicketCreate,
    settings: Settings | None = None,
) -> Ticket:
    authorize(principal, Action.CREATE_TICKET)
    settings = settings or get_settings()

    if db.get(Category, payload.category_id) is None:
        raise ValidationError("Category does not exist", field="category_id")

    data = payload.model_dump(mode="json")
    pattern = ticket_ids.ticket_id_pattern(settings.TICKET_ID_PREFIX)
    for _ in range(settings.TICKET_ID_MAX_RETRIES):
        now = utcnow()
        candidate = ticket_ids.next_ticket_id(db, settings.TICKET_ID_PREFIX, now.year)
        if not pattern.match(candidate):
            raise StoreError(f"Allocated ticket id {candidate!r} is malformed", field="ticket_id")
        ticket = Ticket(
            **data,
            ticket_id=candidate,
            status=TicketStatus.OPEN.value,
            author_id=principal.user_id,
            created_at=now,
            updated_at=now,
        )
        db.add(ticket)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            taken = db.query(Ticket.id).filter(Ticket.ticket_id == candidate).first()
            if taken is None:
                raise
            logger.info("Ticket id %s already allocated, recounting", candidate)
            continue
        db.refresh(ticket)
        logger.info("Ticket %s created by user %s", ticket.ticket_id, principal.user_id)
        return ticket

    raise ConflictError("Could not allocate a unique ticket id, please retry", field="ticket_id")


def list_tickets(
    db: Session,
    principal: Principal,
    status: TicketStatus | None = None,
    priority: TicketPriority | None = None,
    category_id: int | None = None,
) -> list[TicketOut]:
    authorize(principal, Action.LIST_TICKETS)
    query = scope_tickets(db.query(Ticket), principal)
    if status:
        query = query.filter(Ticket.status == TicketStatus(status).value)
    if priority:
        query = query.filter(Ticket.priority == TicketPriority(priority).value)
    if category_id is not None:
        query = query.filter(Ticket.category_id == category_id)
    tickets = query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()

    hide_internal = not can_see_internal(principal)
    results = []
    for ticket in tickets:
        out = TicketOut.model_validate(ticket)
        if hide_internal:
            out.remark_count = sum(1 for r in ticket.remarks if not r.is_internal)
        results.append(out)
    return results


def get_ticket(db: Session, principal: Principal, ticket_pk: int) -> TicketDetail:
    ticket = _get_ticket_or_404(db, ticket_pk)
    authorize(principal, Action.READ_TICKET, ticket)

    detail = TicketDetail.model_validate(ticket)
    if not can_see_internal(principal):
        detail.remarks = [r for r in detail.remarks if not r.is_internal]
        detail.remark_count = len(detail.remarks)
    return detail


def update_ticket(
    db: Session,
    principal: Principal,
    ticket_pk: int,
    payload: TicketUpdate,
    notifier: Notifier | None = None,
) -> Ticket:
    authorize(principal, Action.UPDATE_TICKET)
    ticket = _get_ticket_or_404(db, ticket_pk)
    notifier = notifier or Notifier(db)

    changes = payload.model_dump(exclude_unset=True)
    previous_status = ticket.status
    previous_assignee = ticket.assigned_to_id
    now = utcnow()

    # validate before touching the row so a rejected update leaves it clean
    assignee_id = changes.get("assigned_to_id")
    if assignee_id is not None:
        assignee = db.get(User, assignee_id)
        if assignee is None:
            raise ValidationError("Assignee does not exist", field="assigned_to_id")
        if not is_assignable(assignee.role):
            raise ValidationError(
                "Tickets can only be assigned to staff or admins", field="assigned_to_id"
            )

    # null title/description are ignored; the columns are required
    if changes.get("title") is not None:
        ticket.title = changes["title"]

    if changes.get("description") is not None:
        ticket.description = changes["description"]

    if changes.get("status") is not None:
        status = TicketStatus(changes["status"]).value
        if status == TicketStatus.RESOLVED.value and previous_status != status:
            ticket.resolved_at = now
        ticket.status = status

    if changes.get("priority") is not None:
        ticket.priority = TicketPriority(changes["priority"]).value

    if "assigned_to_id" in changes:
        ticket.assigned_to_id = assignee_id

    _touch(ticket, now)
    db.commit()
    db.refresh(ticket)
    logger.info(
        "Ticket %s updated by user %s: %s",
        ticket.ticket_id,
        principal.user_id,
        ", ".join(sorted(changes)) or "no fields",
    )

    if ticket.status != previous_status and ticket.author_id != principal.user_id:
        notifier.notify(
            ticket.author_id,
            "Ticket status updated",
            f"Your ticket {ticket.ticket_id} is now {ticket.status}",
            "STATUS_CHANGE",
            link=_ticket_link(ticket),
        )
    if (
        ticket.assigned_to_id is not None
        and ticket.assigned_to_id != previous_assignee
        and ticket.assigned_to_id != principal.user_id
    ):
        notifier.notify(
            ticket.assigned_to_id,
            "New ticket assigned",
            f"Ticket {ticket.ticket_id} has been assigned to you",
            "ASSIGNMENT",
            link=_ticket_link(ticket),
        )
    return ticket


def add_remark(
    db: Session,
    principal: Principal,
    ticket_pk: int,
    payload: RemarkCreate,
    notifier: Notifier | None = None,
) -> Remark:
    ticket = _get_ticket_or_404(db, ticket_pk)
    authorize(principal, Action.ADD_REMARK, ticket)
    notifier = notifier or Notifier(db)

    content = payload.content.strip()
    if not content:
        raise ValidationError("Remark content is required", field="content")

    # students cannot write notes they would not be able to read back
    is_internal = payload.is_internal and can_see_internal(principal)
    remark = Remark(
        ticket_id=ticket.id,
        author_id=principal.user_id,
        content=content,
        is_internal=is_internal,
    )
    db.add(remark)
    _touch(ticket, utcnow())
    db.commit()
    db.refresh(remark)

    if not is_internal:
        recipients = {ticket.author_id, ticket.assigned_to_id} - {None, principal.user_id}
        for user_id in sorted(recipients):
            notifier.notify(
                user_id,
                "New remark",
                f"A new remark was added to ticket {ticket.ticket_id}",
                "REMARK",
                link=_ticket_link(ticket),
            )
    return remark
