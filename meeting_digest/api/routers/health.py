from fastapi import APIRouter, Depends
from meeting_digest.api.deps import get_diagnostics_scheduler
from meeting_digest.core import config
from meeting_digest.services.scheduler import DiagnosticsScheduler

router = APIRouter(tags=["meta"])

# liveness only; /diagnostics does the network checks
@router.get("/health")
def health(scheduler: DiagnosticsScheduler = Depends(get_diagnostics_scheduler)):
    return {
        "status": "ok",
        "provider": "mock" if config.use_mock_responses() else "gemini",
        "model": config.GEMINI_MODEL,
        "diagnosticsTimer": scheduler.is_running,
    }
