# complaints/ticket/ticket_id.py
"""Human-readable ticket identifiers: ``PREFIX-YEAR-NNN``.

The ordinal counts identifiers already allocated for the year, so two
concurrent creations can compute the same value. ``ticket_id`` is UNIQUE in
the store; the creating service inserts inside the same transaction and
recounts after a unique violation (see ``services.create_ticket``).
"""
import re

from sqlalchemy.orm import Session

from complaints.ticket.models import Ticket


def year_prefix(prefix: str, year: int) -> str:
    return f"{prefix}-{year}-"


def format_ticket_id(prefix: str, year: int, ordinal: int) -> str:
    return f"{year_prefix(prefix, year)}{ordinal:03d}"


def count_allocated(db: Session, prefix: str, year: int) -> int:
    return (
        db.query(Ticket)
        .filter(Ticket.ticket_id.startswith(year_prefix(prefix, year), autoescape=True))
        .count()
    )


def next_ticket_id(db: Session, prefix: str, year: int) -> str:
    return format_ticket_id(prefix, year, count_allocated(db, prefix, year) + 1)


def ticket_id_pattern(prefix: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(prefix)}-\d{{4}}-\d{{3,}}$")
