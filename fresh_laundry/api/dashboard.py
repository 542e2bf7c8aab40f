from fastapi import APIRouter, Depends

from fresh_laundry.api.deps import get_stats_service, require_admin
from fresh_laundry.models.schemas import StatsOut
from fresh_laundry.services.stats_service import StatsService

router = APIRouter()


@router.get("/stats", response_model=StatsOut, dependencies=[Depends(require_admin)])
def stats(stats_service: StatsService = Depends(get_stats_service)):
    return stats_service.get_stats()
