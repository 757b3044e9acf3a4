"""
Chat Routes

The single question-answering endpoint used by the chat widget, plus
inspection and reset of the caller-side question budget.

Request Flow
------------
1. If a session_id is supplied, reserve one question of its budget; a
   spent budget (answered plus in-flight questions) is rejected with 429
   without touching the pipeline.
2. Run the question through the RAG pipeline.
3. Map a PipelineFailure to its status code and caller-safe message,
   releasing the reservation.
4. On success, record the turn against the reservation and return the
   answer with its cited sources.
"""

from typing import Annotated, Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .dependencies import get_pipeline, get_session_store
from .models import ChatRequest, ChatResponse, ErrorResponse, SessionStatus
from ..rag.pipeline import PipelineFailure, RAGPipeline
from ..sessions.store import QuestionLimitReached, SessionStore

router = APIRouter(prefix="/api/chat", tags=["chat"])


def _limit_reached(sessions: SessionStore, session_id: str) -> JSONResponse:
    max_turns = sessions.status(session_id).max_turns
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": (
                f"You have reached the maximum limit of {max_turns} questions. "
                "Please start a new session."
            )
        },
    )


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    summary="Ask the GÉANT Knowledge Assistant a question",
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def chat(
    req: ChatRequest,
    pipeline: Annotated[RAGPipeline, Depends(get_pipeline)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> Union[ChatResponse, JSONResponse]:
    """
    Answer one question from the document corpus.

    Parameters
    ----------
    req : ChatRequest
        Contains:
        - message: the user's question
        - session_id: optional widget session whose question cap applies
    """
    if req.session_id:
        try:
            sessions.reserve_turn(req.session_id)
        except QuestionLimitReached:
            return _limit_reached(sessions, req.session_id)

    try:
        result = await pipeline.answer(req.message)
    except Exception:
        if req.session_id:
            sessions.release_turn(req.session_id)
        raise

    if isinstance(result, PipelineFailure):
        if req.session_id:
            sessions.release_turn(req.session_id)
        return JSONResponse(
            status_code=result.status_code,
            content={"error": result.message},
        )

    if req.session_id:
        sessions.record_turn(
            req.session_id,
            req.message,
            result.answer,
            result.sources,
        )

    return ChatResponse(answer=result.answer, sources=result.sources)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionStatus,
    response_model_exclude_none=True,
    summary="Question budget and history of a chat session",
)
async def get_session(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> SessionStatus:
    return sessions.status(session_id)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset a chat session",
)
async def reset_session(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> None:
    sessions.reset(session_id)
