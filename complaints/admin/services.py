# complaints/admin/services.py
"""Dashboard statistics, recomputed from the store on every call."""
import math
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from complaints.access.policy import Action, authorize
from complaints.admin.schemas import (
    CategoryCount,
    DashboardOverview,
    DashboardStats,
    PriorityCount,
    RecentTicket,
    StaffWorkload,
    StatusCount,
)
from complaints.category.models import Category
from complaints.core.database import utcnow
from complaints.core.security import Principal
from complaints.ticket.models import Ticket, TicketStatus
from complaints.user.models import Role, User

RECENT_WINDOW = timedelta(days=7)
RECENT_TICKETS_LIMIT = 10
TOP_STAFF_LIMIT = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolution_rate(resolved: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(resolved / total * 100)


def average_resolution_hours(db: Session) -> int:
    rows = (
        db.query(Ticket.created_at, Ticket.resolved_at)
        .filter(Ticket.status == TicketStatus.RESOLVED.value, Ticket.resolved_at.isnot(None))
        .all()
    )
    if not rows:
        return 0
    total_seconds = sum((resolved - created).total_seconds() for created, resolved in rows)
    return round_half_up(total_seconds / len(rows) / 3600)


def tickets_by_status(db: Session) -> list[StatusCount]:
    rows = db.query(Ticket.status, func.count(Ticket.id)).group_by(Ticket.status).all()
    return [StatusCount(status=status, count=count) for status, count in rows]


def tickets_by_priority(db: Session) -> list[PriorityCount]:
    rows = db.query(Ticket.priority, func.count(Ticket.id)).group_by(Ticket.priority).all()
    return [PriorityCount(priority=priority, count=count) for priority, count in rows]


def tickets_by_category(db: Session) -> list[CategoryCount]:
    rows = (
        db.query(Ticket.category_id, Category.name, func.count(Ticket.id))
        .outerjoin(Category, Category.id == Ticket.category_id)
        .group_by(Ticket.category_id, Category.name)
        .all()
    )
    return [
        CategoryCount(category_id=category_id, category=name or "Unknown", count=count)
        for category_id, name, count in rows
    ]


def staff_workload(db: Session, limit: int = TOP_STAFF_LIMIT) -> list[StaffWorkload]:
    assigned = func.count(Ticket.id)
    rows = (
        db.query(User.id, User.name, User.department, assigned)
        .outerjoin(Ticket, Ticket.assigned_to_id == User.id)
        .filter(User.role.in_([Role.STAFF.value, Role.ADMIN.value]))
        .group_by(User.id, User.name, User.department)
        .order_by(assigned.desc(), User.id)
        .limit(limit)
        .all()
    )
    return [
        StaffWorkload(user_id=user_id, name=name, department=department or "N/A", assigned_tickets=count)
        for user_id, name, department, count in rows
    ]


def recent_tickets(db: Session, limit: int = RECENT_TICKETS_LIMIT) -> list[RecentTicket]:
    tickets = (
        db.query(Ticket)
        .options(joinedload(Ticket.author), joinedload(Ticket.category))
        .order_by(Ticket.created_at.desc(), Ticket.id.desc())
        .limit(limit)
        .all()
    )
    return [
        RecentTicket(
            id=t.id,
            ticket_id=t.ticket_id,
            title=t.title,
            status=t.status,
            priority=t.priority,
            created_at=t.created_at,
            author_name=t.author.name if t.author else "Unknown",
            author_email=t.author.email if t.author else None,
            category_name=t.category.name if t.category else "Unknown",
        )
        for t in tickets
    ]


def get_dashboard_stats(
    db: Session, principal: Principal, now: datetime | None = None
) -> DashboardStats:
    authorize(principal, Action.VIEW_DASHBOARD)
    now = now or utcnow()

    total_tickets = db.query(Ticket).count()
    by_status = tickets_by_status(db)
    resolved = sum(s.count for s in by_status if s.status == TicketStatus.RESOLVED.value)

    overview = DashboardOverview(
        total_tickets=total_tickets,
        total_users=db.query(User).count(),
        total_categories=db.query(Category).count(),
        unassigned_tickets=db.query(Ticket).filter(Ticket.assigned_to_id.is_(None)).count(),
        resolution_rate=resolution_rate(resolved, total_tickets),
        avg_resolution_time_hours=average_resolution_hours(db),
        recent_tickets_count=db.query(Ticket).filter(Ticket.created_at >= now - RECENT_WINDOW).count(),
    )
    return DashboardStats(
        overview=overview,
        tickets_by_status=by_status,
        tickets_by_priority=tickets_by_priority(db),
        tickets_by_category=tickets_by_category(db),
        staff_workload=staff_workload(db),
        recent_tickets=recent_tickets(db),
    )
