# network diagnostics: internet, provider domain, api key, live model call
# each check has its own timeout and never raises; failures become a result plus recommendations

import logging
import time
from typing import List, Optional, Tuple

import httpx

from meeting_digest.core import config
from meeting_digest.schemas.diagnostics import DiagnosticResult, NetworkDiagnostics

logger = logging.getLogger(__name__)

INTERNET_TIMEOUT = 5.0
DOMAIN_TIMEOUT = 5.0
API_KEY_TIMEOUT = 10.0
MODEL_TIMEOUT = 15.0

GENERAL_RECOMMENDATIONS = (
    "Check your network connection and firewall settings",
    "Verify your Google API key is correct and has proper permissions",
    "Try running the application from a different network",
)

CheckOutcome = Tuple[DiagnosticResult, List[str]]


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _failure_message(e: Exception, fallback: str) -> str:
    if isinstance(e, httpx.TimeoutException):
        return f"Request timeout ({e.__class__.__name__})"
    return str(e) or fallback


async def check_internet() -> CheckOutcome:
    name = "Internet Connectivity"
    start = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=INTERNET_TIMEOUT) as client:
            r = await client.get(config.CONNECTIVITY_CHECK_URL)
    except httpx.HTTPError as e:
        return (
            DiagnosticResult(name=name, success=False, message=_failure_message(e, "Connection failed")),
            ["Check your internet connection and firewall settings"],
        )
    duration = _elapsed_ms(start)
    if r.is_success:
        return DiagnosticResult(name=name, success=True, message="Basic internet connection is working", duration=duration), []
    return (
        DiagnosticResult(name=name, success=False, message=f"HTTP error: {r.status_code}", duration=duration),
        ["Check your internet connection"],
    )


async def check_provider_domain() -> CheckOutcome:
    # any HTTP answer at all means DNS and TLS to the provider work
    name = "Google API DNS Resolution"
    start = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=DOMAIN_TIMEOUT) as client:
            await client.head(f"{config.GEMINI_API_BASE}/")
    except httpx.HTTPError as e:
        return (
            DiagnosticResult(name=name, success=False, message=_failure_message(e, "DNS resolution failed")),
            ["Check DNS settings or try using a different DNS server (8.8.8.8)"],
        )
    return (
        DiagnosticResult(
            name=name,
            success=True,
            message="Can reach Google Generative Language API domain",
            duration=_elapsed_ms(start),
        ),
        [],
    )


async def check_api_key(api_key: Optional[str]) -> CheckOutcome:
    name = "API Key Validation"
    if not api_key:
        return (
            DiagnosticResult(name=name, success=False, message="No API key provided for testing"),
            ["Set GOOGLE_API_KEY environment variable"],
        )

    start = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=API_KEY_TIMEOUT) as client:
            r = await client.get(f"{config.GEMINI_API_BASE}/v1/models", params={"key": api_key})
    except httpx.HTTPError as e:
        recs = []
        if isinstance(e, httpx.TimeoutException):
            recs.append("API requests are timing out - check network stability")
        return DiagnosticResult(name=name, success=False, message=_failure_message(e, "API key test failed")), recs

    duration = _elapsed_ms(start)
    if r.is_success:
        return DiagnosticResult(name=name, success=True, message="API key is valid and working", duration=duration), []

    recs: List[str] = []
    message = f"API returned status {r.status_code}"
    if r.status_code in (401, 403):
        message = "Invalid API key or insufficient permissions"
        recs += [
            "Check your Google API key in the environment variables",
            "Ensure the API key has Generative AI permissions enabled",
        ]
    elif r.status_code == 429:
        message = "API quota exceeded"
        recs.append("Wait for quota reset or upgrade your API plan")
    return (
        DiagnosticResult(
            name=name,
            success=False,
            message=message,
            duration=duration,
            details={"status": r.status_code, "statusText": r.reason_phrase},
        ),
        recs,
    )


async def check_model(api_key: str) -> CheckOutcome:
    name = "Gemini Model Test"
    url = f"{config.GEMINI_API_BASE}/v1beta/models/{config.GEMINI_MODEL}:generateContent"
    payload = {"contents": [{"parts": [{"text": "Hello"}]}]}
    start = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=MODEL_TIMEOUT) as client:
            r = await client.post(url, json=payload, headers={"x-goog-api-key": api_key})
    except httpx.HTTPError as e:
        recs = []
        if isinstance(e, httpx.TimeoutException):
            recs.append("Gemini API calls are timing out - try reducing content size or increasing timeout")
        return DiagnosticResult(name=name, success=False, message=_failure_message(e, "Model test failed")), recs

    duration = _elapsed_ms(start)
    if r.is_success:
        return (
            DiagnosticResult(
                name=name,
                success=True,
                message=f"{config.GEMINI_MODEL} is accessible and responding",
                duration=duration,
            ),
            [],
        )
    recs = []
    if r.status_code == 404:
        recs.append(f"{config.GEMINI_MODEL} may not be available in your region")
    return (
        DiagnosticResult(
            name=name,
            success=False,
            message=f"Model test failed with status {r.status_code}",
            duration=duration,
            details={"status": r.status_code, "statusText": r.reason_phrase},
        ),
        recs,
    )


async def run_network_diagnostics(api_key: Optional[str] = None) -> NetworkDiagnostics:
    outcomes = [await check_internet(), await check_provider_domain(), await check_api_key(api_key)]
    if api_key:
        outcomes.append(await check_model(api_key))

    results = [result for result, _ in outcomes]
    recommendations = [rec for _, recs in outcomes for rec in recs]
    overall = all(r.success for r in results)
    if not overall:
        recommendations.extend(GENERAL_RECOMMENDATIONS)

    return NetworkDiagnostics(
        overall=overall,
        results=results,
        recommendations=list(dict.fromkeys(recommendations)),
    )


def format_report(diagnostics: NetworkDiagnostics) -> str:
    lines = ["=== Network Diagnostics Report ===", ""]
    lines.append(f"Overall Status: {'HEALTHY' if diagnostics.overall else 'ISSUES DETECTED'}")
    lines += ["", "Test Results:"]
    for result in diagnostics.results:
        mark = "PASS" if result.success else "FAIL"
        duration = f" ({result.duration}ms)" if result.duration is not None else ""
        lines.append(f"[{mark}] {result.name}: {result.message}{duration}")
        if result.details:
            lines.append(f"   Details: {result.details}")
    if diagnostics.recommendations:
        lines += ["", "Recommendations:"]
        lines += [f"- {rec}" for rec in diagnostics.recommendations]
    return "\n".join(lines) + "\n"
