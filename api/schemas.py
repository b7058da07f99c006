"""
Request schemas for the HTTP API.

Field names follow the JSON the web client sends (camelCase).
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CompetitionPayload(BaseModel):
    """Competition fields for create and update; unknown fields are kept."""
    model_config = ConfigDict(extra='allow')

    name: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    date: Optional[str] = Field(None, description="Legacy alias of startDate")
    location: Optional[str] = None
    level: Optional[str] = Field(None, description="Competition level, e.g. Відбіркові")
    description: Optional[str] = None
    categories: Optional[Union[List[str], str]] = Field(None, description="Class labels, list or comma separated")
    maxParticipants: Optional[int] = Field(None, ge=0)
    status: Optional[str] = Field(None, description="planned | registration_open | registration_closed | completed")
    judges: Optional[List[str]] = None


class RegisterRequest(BaseModel):
    dogId: str
    category: str = Field(..., description="Class the dog is entered in")
    handlerName: Optional[str] = None
    documents: Optional[List[Any]] = None


class ParticipantUpdate(BaseModel):
    """Addresses a participant by participantId, or by userId/dogId/category."""
    participantId: Optional[str] = None
    userId: Optional[str] = None
    dogId: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = Field(None, description="registered | confirmed | rejected")
    results: Optional[Dict[str, Any]] = None


class BatchSaveRequest(BaseModel):
    participants: List[ParticipantUpdate]
