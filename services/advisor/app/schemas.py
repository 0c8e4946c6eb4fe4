from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class AdvisorRequest(StrictModel):
    # Optional at the schema level: a missing message is a 400 with an {"error"} body, not a 422.
    message: str | None = Field(default=None, max_length=6000)


class AdvisorResponse(StrictModel):
    reply: str


class ErrorResponse(StrictModel):
    error: str
