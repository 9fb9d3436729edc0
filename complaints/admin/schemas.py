# complaints/admin/schemas.py
from datetime import datetime

from pydantic import BaseModel


class DashboardOverview(BaseModel):
    total_tickets: int
    total_users: int
    total_categories: int
    unassigned_tickets: int
    resolution_rate: int
    avg_resolution_time_hours: int
    recent_tickets_count: int


class StatusCount(BaseModel):
    status: str
    count: int


class PriorityCount(BaseModel):
    priority: str
    count: int


class CategoryCount(BaseModel):
    category_id: int | None = None
    category: str
    count: int


class StaffWorkload(BaseModel):
    user_id: int
    name: str
    department: str
    assigned_tickets: int


class RecentTicket(BaseModel):
    id: int
    ticket_id: str
    title: str
    status: str
    priority: str
    created_at: datetime
    author_name: str
    author_email: str | None = None
    category_name: str


class DashboardStats(BaseModel):
    overview: DashboardOverview
    tickets_by_status: list[StatusCount]
    tickets_by_priority: list[PriorityCount]
    tickets_by_category: list[CategoryCount]
    staff_workload: list[StaffWorkload]
    recent_tickets: list[RecentTicket]
