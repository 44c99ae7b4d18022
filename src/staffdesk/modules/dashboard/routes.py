"""Dashboard routes."""

from staffdesk.modules.dashboard import router
from staffdesk.modules.dashboard.schemas import DashboardEnvelope
from staffdesk.modules.dashboard.services import DashboardSvc


@router.get(
    "",
    response_model=DashboardEnvelope,
    summary="Dashboard statistics",
)
async def dashboard(service: DashboardSvc) -> DashboardEnvelope:
    return DashboardEnvelope(data=await service.stats())
