from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class LLMIntent(BaseModel):
    """
    Classification reply from the model: {"intent": "..."}.

    Extra keys are tolerated; small instruction models like to add a "reason" or "confidence".
    """

    model_config = ConfigDict(extra="ignore")

    intent: str | None = None
