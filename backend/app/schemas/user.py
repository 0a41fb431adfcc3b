"""
Bookstore Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract for registration and login.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate OpenAPI documentation.

Wire Format:
    Field names are camelCase on the wire (firstName, contactId, statusCode)
    and snake_case in Python. Requests accept either spelling.

    Required fields (email, password) are Optional here on purpose: a missing
    value must produce the "Email and Password cannot be empty" envelope from
    the service, not FastAPI's generic 422.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every wire model: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserRegData(CamelModel):
    """Registration payload for POST /userRegister and /userRegisterwithfile."""

    first_name: Optional[str] = Field(default=None, description="Given name")
    last_name: Optional[str] = Field(default=None, description="Family name")
    email: Optional[str] = Field(default=None, description="Login email (required, non-blank)")
    password: Optional[str] = Field(default=None, description="Plaintext password (required, non-blank)")
    contact_id: Optional[int] = Field(default=None, description="External contact reference")

    def __repr__(self) -> str:
        # Never let the plaintext password reach a log line
        return f"UserRegData(email={self.email!r}, contact_id={self.contact_id!r})"

    __str__ = __repr__


class LoginRequest(CamelModel):
    """Credentials payload for POST /login."""

    email: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)

    def __repr__(self) -> str:
        return f"LoginRequest(email={self.email!r})"

    __str__ = __repr__


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserAccountResponse(CamelModel):
    """
    Public view of a UserAccount.

    The encoded password is intentionally absent: it is reversible, so
    serializing it would hand out the plaintext.
    """

    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    contact_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


STATUS_SUCCESS = "SUCCESS"
STATUS_FAILED = "FAILED"      # client-side problem (validation, bad credentials)
STATUS_FAILURE = "FAILURE"    # server-side problem (database, unexpected error)


class ResponseMessage(CamelModel):
    """
    Envelope returned by every user route.

    Example:
        {
            "statusCode": 201,
            "status": "SUCCESS",
            "message": "User Registered Successfully",
            "data": {"id": "...", "email": "a@x.com", ...}
        }
    """

    status_code: int = Field(description="Outcome code (200, 201, 400, 404, 500)")
    status: str = Field(description="SUCCESS, FAILED or FAILURE")
    message: str = Field(description="Human-readable outcome")
    data: Optional[Any] = Field(default=None, description="Payload on success")

    @classmethod
    def success(cls, message: str, data: Any = None, status_code: int = 201) -> "ResponseMessage":
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", by_alias=True)
        return cls(status_code=status_code, status=STATUS_SUCCESS, message=message, data=data)

    @classmethod
    def failed(cls, message: str, status_code: int = 400) -> "ResponseMessage":
        return cls(status_code=status_code, status=STATUS_FAILED, message=message)

    @classmethod
    def failure(cls, message: str, status_code: int = 500) -> "ResponseMessage":
        return cls(status_code=status_code, status=STATUS_FAILURE, message=message)

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys, for JSONResponse bodies."""
        return self.model_dump(mode="json", by_alias=True)


class HealthResponse(BaseModel):
    """Returned by GET /health for probes and load balancers."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
