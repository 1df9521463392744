"""Request and response models for the HTTP API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatRequest(BaseModel):
    """Body of POST /chat.

    filters is deliberately untyped: malformed filter values are dropped
    field by field instead of rejecting the request.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field("", description="The user's chat message")
    session_id: Optional[str] = Field(None, alias="sessionId", description="Conversation identifier")
    filters: Optional[Any] = Field(None, description="Explicit filters overriding text-derived ones")
    stream: Optional[bool] = Field(None, description="Force streamed (true) or batched (false) delivery")

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("session_id", mode="before")
    @classmethod
    def coerce_session_id(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            v = str(v)
        if not isinstance(v, str):
            return None
        return v.strip() or None


class ChatResponse(BaseModel):
    """Batched reply: the composed text plus the postings it is grounded on."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    jobs: List[Dict[str, Any]]
    filters: Dict[str, Any] = Field(default_factory=dict)
    fallback_note: Optional[str] = Field(None, serialization_alias="fallbackNote")
    tier: str


class HealthResponse(BaseModel):
    status: str
    job_count: int
    generator: str
    sessions: int
