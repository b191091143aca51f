"""
FormDrop Backend: Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between the form frontend
       and this backend, plus the validated in-memory submission value.
Why:   Strict serialization and OpenAPI doc generation.
How:   FastAPI serializes route return values through these models.
Who:   Route handlers (response_model) and services (SubmissionRecord).

Schemas are separate from the SQLAlchemy model so the API contract can
change independently of the table layout.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain Values
# ══════════════════════════════════════════════════════════════════════════


class SubmissionRecord(BaseModel):
    """
    A validated submission that has not been stored yet.

    Produced only by validate_submission(); frozen so nothing downstream can
    alter what was validated.
    """
    name: str
    age: str
    message: str
    email: str
    images: List[str] = Field(min_length=1)

    model_config = {"frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SubmissionResponse(BaseModel):
    """
    What:  Full representation of a stored submission.
    Who:   Returned inside IntakeResponse and as items of GET /collectionData.
    """
    id: uuid.UUID = Field(description="Store-generated identifier")
    name: str
    age: str = Field(description="Age exactly as submitted (not parsed)")
    message: str
    email: str
    images: List[str] = Field(description="Absolute URLs of the attached images")
    created_at: datetime = Field(description="When the submission was stored (UTC)")

    model_config = {"from_attributes": True}


class IntakeResponse(BaseModel):
    """
    What:  Response to POST /addUser with HTTP 201 Created.
    When:  After the submission was stored and the email was sent.
    """
    message: str = Field(
        default="User added and email sent",
        description="Human-readable success message"
    )
    data: SubmissionResponse


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every endpoint.

    Example:
        {"error": "All fields are required!"}
        {"error": "Failed to send notification email",
         "details": "The submission was saved but the notification email could not be sent."}
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[str] = Field(default=None, description="Extra context, when any")


class HealthResponse(BaseModel):
    """What: Health check payload for monitors and load balancers."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
