"""WebSocket message schemas."""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class WebSocketMessage(BaseModel):
    """WebSocket action from client."""
    action: str = Field(..., description="Action name, e.g. sign_in, select_screen, add_food")
    payload: Dict[str, Any] = Field(
        default_factory=dict,
        description="Action arguments (form fields, screen name, entry id, ...)"
    )


class WebSocketResponse(BaseModel):
    """WebSocket event to client."""
    event: str = Field(..., description="Event type: auth, state, notification, error")
    data: Any = Field(None, description="Event content")
    session_id: Optional[str] = Field(None, description="Session identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
