# complaints/models.py
# Importing every model module registers all tables on Base.metadata
# and lets string relationship targets resolve.
from complaints.user.models import Role, User
from complaints.category.models import Category
from complaints.ticket.models import Remark, Ticket, TicketPriority, TicketStatus
from complaints.attachment.models import Attachment
from complaints.notification.models import Notification

__all__ = [
    "Attachment",
    "Category",
    "Notification",
    "Remark",
    "Role",
    "Ticket",
    "TicketPriority",
    "TicketStatus",
    "User",
]
