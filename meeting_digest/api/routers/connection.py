import logging
from datetime import datetime, timezone
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from meeting_digest.core import config
from meeting_digest.core.errors import ProviderError, classify, error_payload
from meeting_digest.providers.gemini import GeminiProvider
from meeting_digest.services.connection import validate_api_connection
from meeting_digest.services.retry import retry_with_backoff

router = APIRouter(tags=["meta"])
logger = logging.getLogger(__name__)

SMOKE_PROMPT = 'Say "Hello from Gemini!"'


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/connection-test")
async def connection_test():
    """Check the credential, then make one small live call through the retry engine."""
    api_key = config.GOOGLE_API_KEY
    if not api_key:
        return JSONResponse({"error": "Google API key not configured or empty"}, status_code=500)

    check = await validate_api_connection(api_key)
    if not check.is_valid:
        return JSONResponse({"error": "API validation failed", "details": check.error}, status_code=500)

    provider = GeminiProvider(api_key, timeout=15.0)
    try:
        text = await retry_with_backoff(lambda: provider.generate(SMOKE_PROMPT), 3, 1000)
    except ProviderError as e:
        classified = classify(e)
        logger.error("connection test failed (%s): %s", classified.code.value, classified.details)
        return JSONResponse(error_payload(classified), status_code=classified.status_code)

    return {
        "success": True,
        "message": "Gemini connection successful",
        "response": text or "No response",
        "timestamp": _now(),
    }
