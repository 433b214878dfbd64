"""
Health and error payload schemas shared by both services
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness payload returned by every /health endpoint"""
    ok: bool = Field(..., description="True when the service can serve requests")


class ErrorResponse(BaseModel):
    """Error body returned for failures the services produce themselves"""
    error: str = Field(..., description="Short error category")
    message: Optional[str] = Field(None, description="Human readable detail")
    details: Optional[List[Dict[str, Any]]] = Field(None, description="Per field problems")
