"""Dashboard response schemas."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Headline counts shown on the admin dashboard."""

    users_count: int
    roles_count: int
    permissions_count: int
    verified_users_count: int


class DashboardEnvelope(BaseModel):
    data: DashboardStats
