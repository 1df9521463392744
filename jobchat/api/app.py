"""FastAPI application exposing the catalog, search and chat endpoints."""

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from jobchat.catalog import postings_to_dicts
from jobchat.composer import ComposedReply, ComposeRequest, DoneEvent
from jobchat.domain.models import FilterSet
from jobchat.logging import get_logger, log_context, new_request_id
from jobchat.logging.context import push_log_context
from jobchat.sessions import SessionStore

from .dependencies import AppServices, get_services
from .schemas import ChatRequest, ChatResponse, HealthResponse
from .sse import SSE_HEADERS, format_sse, wants_event_stream

logger = get_logger(__name__, component="api")


def record_exchange(
    sessions: SessionStore, session_id: Optional[str], message: str, reply: ComposedReply
) -> None:
    """Store a completed exchange; failed replies leave the history untouched."""
    if not session_id or reply.failed:
        return
    sessions.extend(
        session_id,
        [
            {"role": "user", "content": message},
            {"role": "assistant", "content": reply.text},
        ],
    )


def create_app(services: AppServices, allowed_origins: Sequence[str] = ()) -> FastAPI:
    """Build the API around already-initialized services.

    Args:
        services: Catalog, engine, composer and session store for this process
        allowed_origins: CORS allow-list for browser callers
    """
    app = FastAPI(title="jobchat", description="Grounded conversational job search")
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}",
            extra={"event": "api.unhandled_error", "error_type": type(exc).__name__},
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    @app.get("/", tags=["health"])
    def root() -> Dict[str, str]:
        return {"status": "OK"}

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    def health(svc: AppServices = Depends(get_services)) -> HealthResponse:
        return HealthResponse(
            status="ok" if len(svc.catalog) else "degraded",
            job_count=len(svc.catalog),
            generator="openai" if svc.composer.uses_model else "template",
            sessions=len(svc.sessions),
        )

    @app.get("/jobs", tags=["jobs"])
    def list_jobs(svc: AppServices = Depends(get_services)) -> List[Dict[str, Any]]:
        return postings_to_dicts(svc.catalog.all())

    @app.get("/jobs/{job_id}", tags=["jobs"])
    def get_job(job_id: str, svc: AppServices = Depends(get_services)) -> Dict[str, Any]:
        posting = svc.catalog.get_by_id(job_id)
        if posting is None:
            raise HTTPException(status_code=404, detail="job_not_found")
        return posting.to_public_dict()

    @app.get("/search", tags=["jobs"])
    def search(
        state: Optional[str] = Query(None),
        profession: Optional[str] = Query(None),
        specialty: Optional[str] = Query(None),
        unit: Optional[str] = Query(None),
        min_rate: Optional[str] = Query(None, alias="minRate"),
        svc: AppServices = Depends(get_services),
    ) -> List[Dict[str, Any]]:
        # Every parameter is parsed leniently; unusable values impose no constraint
        filters = FilterSet.from_raw(
            {
                "state": state,
                "profession": profession,
                "specialty": specialty,
                "unit": unit,
                "min_rate": min_rate,
            }
        )
        with log_context(request_id=new_request_id()):
            result = svc.engine.search(filters)
        return postings_to_dicts(result.jobs)

    @app.post("/chat", tags=["chat"])
    @app.post("/api/chat", tags=["chat"], include_in_schema=False)
    async def chat(body: ChatRequest, request: Request, svc: AppServices = Depends(get_services)):
        request_id = new_request_id()
        message = body.message.strip()

        with log_context(request_id=request_id, session_id=body.session_id):
            filters = svc.extractor.extract(message, body.filters)
            match_result = svc.engine.search(filters)
            compose_request = ComposeRequest(
                message=message,
                filters=filters,
                match_result=match_result,
                history=svc.sessions.history(body.session_id),
            )

            logger.info(
                "Chat request received",
                extra={
                    "event": "chat.received",
                    "message_chars": len(message),
                    "tier": match_result.tier.value,
                    "result_count": len(match_result),
                },
            )

            if wants_event_stream(request, body.stream):
                return StreamingResponse(
                    _event_stream(svc, compose_request, body.session_id, request_id),
                    media_type="text/event-stream",
                    headers=SSE_HEADERS,
                )

            reply = await svc.composer.compose(compose_request)
            record_exchange(svc.sessions, body.session_id, message, reply)

        return ChatResponse(
            text=reply.text,
            jobs=postings_to_dicts(reply.jobs),
            filters=filters.to_dict(),
            fallback_note=match_result.fallback_note,
            tier=match_result.tier.value,
        ).model_dump(by_alias=True)

    return app


async def _event_stream(
    svc: AppServices,
    compose_request: ComposeRequest,
    session_id: Optional[str],
    request_id: str,
) -> AsyncIterator[str]:
    """Forward composer events as SSE frames until done or the client leaves."""
    # The response body runs in its own task, so this context is not shared
    push_log_context(request_id=request_id, session_id=session_id)

    events = svc.composer.stream(compose_request)
    try:
        async for event in events:
            if isinstance(event, DoneEvent):
                record_exchange(svc.sessions, session_id, compose_request.message, event.reply)
            yield format_sse(event.to_frame())
    except asyncio.CancelledError:
        logger.info(
            "Client disconnected mid-stream",
            extra={"event": "chat.stream.disconnected"},
        )
        raise
    finally:
        await events.aclose()
