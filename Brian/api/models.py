"""
API request/response models
Pydantic models for FastAPI endpoints
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.models import AgentResponse, ToolSettings


class AgentRequest(BaseModel):
    """
    Agent request model.

    ``query`` is optional here so a missing query reaches the handler and
    is rejected with the same client error as a blank one.
    """
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    vision: Optional[str] = None
    enabled_tools: Optional[ToolSettings] = Field(default=None, alias="enabledTools")


class ErrorResponse(BaseModel):
    error: str


__all__ = ["AgentRequest", "AgentResponse", "ErrorResponse"]
