from fastapi import Request
from meeting_digest.services.digest_store import DigestStore
from meeting_digest.services.scheduler import DiagnosticsScheduler


def get_digest_store(request: Request) -> DigestStore:
    return request.app.state.digest_store


def get_diagnostics_scheduler(request: Request) -> DiagnosticsScheduler:
    return request.app.state.diagnostics_scheduler
