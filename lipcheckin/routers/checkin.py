import logging
from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse
from ..auth import require_token
from ..catalog import default_tasks
from ..config import Settings, get_settings
from ..services.orchestrator import CheckinOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

STATUS_CODES = {
    "ok": 200,
    "partial": 207,
    "failed": 502,
    "config_error": 503,
}


def get_orchestrator(settings: Settings = Depends(get_settings)) -> CheckinOrchestrator:
    return CheckinOrchestrator(settings, default_tasks(settings.daily_system_error_as_done))


@router.api_route("/manual-checkin", methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"])
def manual_checkin(orchestrator: CheckinOrchestrator = Depends(get_orchestrator), _=Depends(require_token)):
    logger.info("Manual check-in for all accounts and tasks started...")
    report = orchestrator.run_all("manual")
    return ORJSONResponse(
        content=[o.model_dump() for o in report.outcomes],
        status_code=STATUS_CODES[report.aggregate],
    )
