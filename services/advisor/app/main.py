from __future__ import annotations

import time
import uuid

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.advisor.app.db import create_engine, create_sessionmaker, get_store
from services.advisor.app.graph import AdvisorContext, build_graph, run_advisor
from services.advisor.app.graph_helpers import AdvisorInputError
from services.advisor.app.logging import configure_logging, logger
from services.advisor.app.observability import add_metrics_middleware, setup_tracing
from services.advisor.app.replies import MISSING_MESSAGE_ERROR, SERVER_ERROR
from services.advisor.app.schemas import AdvisorRequest, AdvisorResponse, ErrorResponse
from services.advisor.app.settings import SETTINGS, AdvisorSettings
from services.advisor.app.stores import AdvisorStore


router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get("/healthz")
async def healthz(store: AdvisorStore = Depends(get_store)) -> dict:
    await store.ping()
    return {"ok": True}


@router.post(
    "/advisor",
    response_model=AdvisorResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def advisor(req: AdvisorRequest, request: Request, store: AdvisorStore = Depends(get_store)):
    # Every log line of this request carries the same request_id.
    with structlog.contextvars.bound_contextvars(request_id=uuid.uuid4().hex):
        return await _advise(req, request, store)


async def _advise(req: AdvisorRequest, request: Request, store: AdvisorStore):
    start = time.perf_counter()

    message = (req.message or "").strip()
    if not message:
        logger.info("advisor_input_rejected", reason="missing_message")
        return _error(400, MISSING_MESSAGE_ERROR)

    logger.info("advisor_request", message_chars=len(message))
    ctx = AdvisorContext(settings=request.app.state.settings, store=store)
    try:
        out = await run_advisor(request.app.state.graph, message, ctx)
    except AdvisorInputError as e:
        logger.info("advisor_input_rejected", reason=str(e))
        return _error(400, str(e))
    except Exception:  # noqa: BLE001
        # Store or completion API failure: log everything, leak nothing.
        logger.exception("advisor_failed")
        return _error(500, SERVER_ERROR)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    rec = out.get("recommendation")
    logger.info(
        "response_sent",
        intent=out.get("intent"),
        intent_tier=out.get("intent_tier"),
        outcome=rec.outcome if rec else None,
        elapsed_ms=elapsed_ms,
    )
    return AdvisorResponse(reply=out.get("reply") or "")


def create_app(settings: AdvisorSettings | None = None) -> FastAPI:
    settings = settings or SETTINGS
    app = FastAPI(title="Resort Booking Advisor API", version="0.1.0")
    configure_logging(settings.log_level)

    engine = create_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = create_sessionmaker(engine)
    app.state.graph = build_graph()

    if settings.tracing_enabled:
        setup_tracing(app, service_name="advisor", engine=engine)
    add_metrics_middleware(app)

    # Local dev UI runs on :3000
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
