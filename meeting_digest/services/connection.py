# pre-flight credential check against the model listing endpoint
# only reachability and credential validity matter here, not whether a given model exists

import logging
import httpx
from meeting_digest.core import config
from meeting_digest.schemas.diagnostics import ConnectionCheck

logger = logging.getLogger(__name__)

VALIDATION_TIMEOUT = 10.0


async def validate_api_connection(api_key: str) -> ConnectionCheck:
    url = f"{config.GEMINI_API_BASE}/v1/models"
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(VALIDATION_TIMEOUT)) as client:
            r = await client.get(url, params={"key": api_key}, headers={"Content-Type": "application/json"})
    except httpx.TimeoutException:
        return ConnectionCheck(is_valid=False, error="Connection timeout - check internet connection")
    except httpx.TransportError as e:
        logger.info("credential check could not reach provider: %s", e)
        return ConnectionCheck(is_valid=False, error="Network connection failed")
    except httpx.HTTPError as e:
        return ConnectionCheck(is_valid=False, error=str(e) or "Unknown connection error")

    if r.is_success:
        return ConnectionCheck(is_valid=True)
    if r.status_code in (401, 403):
        return ConnectionCheck(is_valid=False, error="Invalid API key or insufficient permissions")
    if r.status_code == 429:
        return ConnectionCheck(is_valid=False, error="API quota exceeded")
    return ConnectionCheck(is_valid=False, error=f"API returned status {r.status_code}")
