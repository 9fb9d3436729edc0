# complaints/access/policy.py
"""Role-scoped visibility and mutation rules.

Every route and service asks this module instead of comparing roles
inline, so the read path and the write path cannot drift apart.

    STUDENT  sees tickets they authored
    STAFF    sees tickets assigned to them, may update any ticket
    ADMIN    sees and updates everything, manages categories and users
"""
from enum import Enum

from fastapi import Depends
from sqlalchemy.orm import Query

from complaints.core.errors import ForbiddenError
from complaints.core.security import Principal, get_current_principal
from complaints.ticket.models import Ticket
from complaints.user.models import Role


class Action(str, Enum):
    LIST_TICKETS = "list_tickets"
    READ_TICKET = "read_ticket"
    CREATE_TICKET = "create_ticket"
    UPDATE_TICKET = "update_ticket"
    ADD_REMARK = "add_remark"
    UPLOAD_ATTACHMENT = "upload_attachment"
    READ_ATTACHMENT = "read_attachment"
    MANAGE_CATEGORIES = "manage_categories"
    MANAGE_USERS = "manage_users"
    VIEW_DASHBOARD = "view_dashboard"


_DENIED_MESSAGES = {
    Action.READ_TICKET: {
        Role.STUDENT: "Forbidden: You can only view your own tickets",
        Role.STAFF: "Forbidden: You can only view assigned tickets",
    },
    Action.UPLOAD_ATTACHMENT: {
        Role.STUDENT: "Forbidden: You can only upload to your own tickets",
        Role.STAFF: "Forbidden: You can only upload to assigned tickets",
    },
}

_STAFF_ROLES = (Role.STAFF, Role.ADMIN)


def _can_read(principal: Principal, ticket: Ticket) -> bool:
    if principal.role == Role.ADMIN:
        return True
    if principal.role == Role.STUDENT:
        return ticket.author_id == principal.user_id
    return ticket.assigned_to_id == principal.user_id


def is_allowed(principal: Principal, action: Action, ticket: Ticket | None = None) -> bool:
    if action in (Action.LIST_TICKETS, Action.CREATE_TICKET):
        return True
    if action in (Action.READ_TICKET, Action.ADD_REMARK, Action.READ_ATTACHMENT):
        return ticket is not None and _can_read(principal, ticket)
    if action == Action.UPLOAD_ATTACHMENT:
        if ticket is None or not _can_read(principal, ticket):
            return False
        return principal.role != Role.STUDENT or ticket.author_id == principal.user_id
    if action == Action.UPDATE_TICKET:
        # staff may update tickets outside their read scope
        return principal.role in _STAFF_ROLES
    if action in (Action.MANAGE_CATEGORIES, Action.MANAGE_USERS, Action.VIEW_DASHBOARD):
        return principal.role == Role.ADMIN
    return False


def authorize(principal: Principal, action: Action, ticket: Ticket | None = None) -> None:
    """Raise ``ForbiddenError`` unless ``principal`` may perform ``action``."""
    if is_allowed(principal, action, ticket):
        return
    message = _DENIED_MESSAGES.get(action, {}).get(principal.role)
    raise ForbiddenError(message or "Forbidden: Insufficient permissions")


def scope_tickets(query: Query, principal: Principal) -> Query:
    """Apply the implicit list filter for ``principal`` to a Ticket query."""
    if principal.role == Role.STUDENT:
        return query.filter(Ticket.author_id == principal.user_id)
    if principal.role == Role.STAFF:
        return query.filter(Ticket.assigned_to_id == principal.user_id)
    return query


def can_see_internal(principal: Principal) -> bool:
    return principal.role in _STAFF_ROLES


def is_assignable(role: str) -> bool:
    return role in (r.value for r in _STAFF_ROLES)


def require(action: Action):
    """Route dependency for actions that need no ticket context."""

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        authorize(principal, action)
        return principal

    return dependency
