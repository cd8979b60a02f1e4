from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ConnectionCheck(BaseModel):
    is_valid: bool
    error: Optional[str] = None


class DiagnosticResult(BaseModel):
    name: str
    success: bool
    message: str
    duration: Optional[int] = None  # milliseconds
    details: Optional[Dict[str, Any]] = None


class NetworkDiagnostics(BaseModel):
    overall: bool
    results: List[DiagnosticResult] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
