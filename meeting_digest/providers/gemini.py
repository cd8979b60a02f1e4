import json
import logging
import httpx
from typing import Any, AsyncIterator, Dict, Optional
from meeting_digest.core import config
from meeting_digest.core.errors import ProviderError
from meeting_digest.providers.base import Provider

logger = logging.getLogger(__name__)


def _extract_text(data: Any) -> str:
    if not isinstance(data, dict):
        raise ProviderError("Unexpected response from Gemini.")
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise ProviderError("Unexpected response from Gemini.")
    content = candidates[0].get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ""
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and isinstance(err.get("message"), str):
        return err["message"]
    return ""


def _status_error(response: httpx.Response) -> ProviderError:
    msg = f"Gemini API error: {response.status_code} {response.reason_phrase}"
    detail = _error_detail(response)
    if detail:
        msg = f"{msg} - {detail}"
    return ProviderError(msg)


def _transport_error(e: httpx.HTTPError) -> ProviderError:
    # wording matters: the classifier keys off "timeout" and "network"
    if isinstance(e, httpx.TimeoutException):
        return ProviderError(f"Gemini request timeout: {e.__class__.__name__}")
    if isinstance(e, httpx.TransportError):
        return ProviderError(f"Gemini network error: {e}")
    return ProviderError(f"Gemini HTTP error: {e}")


class GeminiProvider(Provider):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model or config.GEMINI_MODEL
        self._base_url = (base_url or config.GEMINI_API_BASE).rstrip("/")
        self._timeout = httpx.Timeout(timeout or config.REQUEST_TIMEOUT, connect=10.0)

    def _url(self, method: str) -> str:
        return f"{self._base_url}/v1beta/models/{self._model}:{method}"

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": self._api_key}

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": config.MAX_OUTPUT_TOKENS,
                "temperature": config.TEMPERATURE,
            },
        }

    async def generate(self, prompt: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.post(self._url("generateContent"), json=self._payload(prompt), headers=self._headers())
        except httpx.HTTPError as e:
            raise _transport_error(e) from e
        if r.is_error:
            raise _status_error(r)
        try:
            data = r.json()
        except json.JSONDecodeError as e:
            raise ProviderError("Unexpected response from Gemini.") from e
        return _extract_text(data)

    async def open_stream(self, prompt: str) -> AsyncIterator[str]:
        # returns only after the status line is known, so a retry around this call
        # covers connection and HTTP errors but never a half-consumed stream
        client = httpx.AsyncClient(timeout=self._timeout)
        request = client.build_request(
            "POST",
            self._url("streamGenerateContent"),
            params={"alt": "sse"},
            json=self._payload(prompt),
            headers=self._headers(),
        )
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            raise _transport_error(e) from e

        if response.is_error:
            try:
                await response.aread()
                raise _status_error(response)
            finally:
                await response.aclose()
                await client.aclose()

        return self._iter_chunks(client, response)

    async def _iter_chunks(self, client: httpx.AsyncClient, response: httpx.Response) -> AsyncIterator[str]:
        try:
            async for line in response.aiter_lines():
                if not line.startswith("data:"):
                    continue
                try:
                    data = json.loads(line[len("data:"):].strip())
                except json.JSONDecodeError:
                    continue
                if not isinstance(data, dict):
                    continue
                err = data.get("error")
                if err:
                    msg = err.get("message") if isinstance(err, dict) else str(err)
                    raise ProviderError(f"Gemini error: {msg}")
                text = _extract_text(data)
                if text:
                    yield text
        except httpx.HTTPError as e:
            raise _transport_error(e) from e
        finally:
            await response.aclose()
            await client.aclose()
