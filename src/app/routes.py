from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from src.app.config import Settings, get_settings
from src.app.dependencies import get_orchestrator, get_practitioner_cache, get_session_store
from src.orchestrator.intents import Intent
from src.orchestrator.state import ConversationState
from src.schemas.chat import ResetResponse, SearchRequest, SearchResponse
from src.services.practitioners import PractitionerCache
from src.services.session_memory import SessionMemoryStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
def health(
    settings: Settings = Depends(get_settings),
    cache: PractitionerCache = Depends(get_practitioner_cache),
) -> dict:
    return {"app": settings.app_name, "status": "ok", "practitioners": len(cache)}


@router.post("/api/v1/search", response_model=SearchResponse)
def search(
    payload: SearchRequest,
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    orchestrator = Depends(get_orchestrator),
) -> SearchResponse:
    question = payload.question or ""
    if not question.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No question provided")

    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        session_id = str(uuid.uuid4())
        response.set_cookie(
            key=settings.session_cookie_name,
            value=session_id,
            httponly=True,
            max_age=settings.session_cookie_max_age,
        )
        logger.info("Issued new session %s", session_id)

    final_state = orchestrator.run(ConversationState(session_id=session_id, question=question))
    intent = None if final_state.intent == Intent.NONE else final_state.intent.value
    return SearchResponse(answer=final_state.answer, intent=intent, session_id=session_id)


@router.post("/api/v1/reset", response_model=ResetResponse)
def reset(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    session_store: SessionMemoryStore = Depends(get_session_store),
) -> ResetResponse:
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        session_store.reset(session_id)
        logger.info("Reset session %s", session_id)
    response.delete_cookie(settings.session_cookie_name)
    return ResetResponse(success=True)
