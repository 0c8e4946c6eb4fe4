from __future__ import annotations

from typing import Any

from langchain_openai import ChatOpenAI

from services.advisor.app.settings import AdvisorSettings


class ModelConfigError(RuntimeError):
    pass


def _chat_model(settings: AdvisorSettings, **kwargs: Any) -> Any:  # noqa: ANN401
    if not settings.openai_api_key:
        raise ModelConfigError("OPENAI_API_KEY is not set. Configure it and restart the advisor.")

    return ChatOpenAI(
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        default_headers={"HTTP-Referer": settings.openai_referer, "X-Title": settings.openai_title},
        **kwargs,
    )


def get_intent_model(settings: AdvisorSettings) -> Any:  # noqa: ANN401
    # Classification must come back as a JSON object.
    return _chat_model(settings, temperature=0.0).bind(response_format={"type": "json_object"})


def get_reply_model(settings: AdvisorSettings) -> Any:  # noqa: ANN401
    return _chat_model(settings, temperature=0.7, max_tokens=500)
