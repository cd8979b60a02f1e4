import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from meeting_digest.api.deps import get_diagnostics_scheduler
from meeting_digest.core import config
from meeting_digest.services.diagnostics import format_report
from meeting_digest.services.scheduler import DiagnosticsScheduler

router = APIRouter(tags=["diagnostics"])
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/diagnostics")
async def diagnostics(action: str = "run", scheduler: DiagnosticsScheduler = Depends(get_diagnostics_scheduler)):
    api_key = config.GOOGLE_API_KEY or None

    if action == "start-timer":
        scheduler.start(api_key)
        return {
            "success": True,
            "message": f"Diagnostics timer started (runs every {config.DIAGNOSTICS_INTERVAL_HOURS:g} hours)",
            **scheduler.status(),
            "timestamp": _now(),
        }

    if action == "stop-timer":
        scheduler.stop()
        return {"success": True, "message": "Diagnostics timer stopped", **scheduler.status(), "timestamp": _now()}

    if action == "status":
        return {"success": True, **scheduler.status(), "timestamp": _now()}

    # anything else runs one pass now
    logger.info("running network diagnostics")
    try:
        result = await scheduler.run_once(api_key)
    except Exception:
        logger.exception("diagnostics error")
        return JSONResponse(
            {
                "success": False,
                "error": "Failed to run diagnostics",
                "isTimerRunning": scheduler.is_running,
                "lastRun": scheduler.last_run.isoformat() if scheduler.last_run else None,
                "timestamp": _now(),
            },
            status_code=500,
        )
    report = format_report(result)
    logger.info("\n%s", report)
    return {
        "success": result.overall,
        "diagnostics": result,
        "report": report,
        **scheduler.status(),
        "timestamp": _now(),
    }
