"""Account schemas."""

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """Signed-in identity."""
    uid: str = Field(..., description="User identifier")
    email: str = Field(..., description="Account e-mail")

    model_config = {"frozen": True}
