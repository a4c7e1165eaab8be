"""Chat API endpoints"""
import time

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from trip_planner.agents import GenerationError
from trip_planner.api.deps import get_orchestrator, get_routing_policy
from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import (
    ChatRequest,
    ChatResponse,
    ConversationState,
    ErrorResponse,
    TripOverview,
)
from trip_planner.services import (
    ChatMode,
    ConversationCompletedError,
    ConversationNotFoundError,
    ConversationOrchestrator,
    RoutingPolicy,
)

router = APIRouter(prefix="/api/chat", tags=["chat"])
logger = get_logger(__name__)


def _render(response: ChatResponse) -> JSONResponse:
    # trip is only present once the conversation is complete
    exclude = {"trip"} if response.trip is None else None
    return JSONResponse(response.model_dump(mode="json", by_alias=True, exclude=exclude))


@router.post(
    "",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def send_message(
    request: ChatRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
    routing_policy: RoutingPolicy = Depends(get_routing_policy),
) -> JSONResponse:
    """Send a chat message, starting a conversation when no id is given"""
    start_time = time.time()

    logger.info(
        "chat_request_received",
        conversation_id=request.conversation_id,
        message_length=len(request.message),
        message_preview=request.message[:100] + "..." if len(request.message) > 100 else request.message,
    )

    try:
        if request.conversation_id is None and await routing_policy.choose(request.message) == ChatMode.DIRECT:
            outcome = await orchestrator.complete_directly(request.message)
        else:
            outcome = await orchestrator.handle_message(
                request.message,
                conversation_id=request.conversation_id,
            )
    except ConversationNotFoundError as e:
        logger.warning(
            "conversation_not_found",
            conversation_id=e.conversation_id,
        )
        raise HTTPException(status_code=404, detail=str(e))
    except ConversationCompletedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GenerationError as e:
        logger.error(
            "chat_generation_error",
            conversation_id=request.conversation_id,
            error=str(e),
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(
            "chat_processing_error",
            conversation_id=request.conversation_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise HTTPException(status_code=500, detail="Failed to process message")

    logger.info(
        "chat_response_sent",
        conversation_id=outcome.conversation.id,
        is_complete=outcome.is_complete,
        trip_id=outcome.trip.id if outcome.trip else None,
        total_duration_ms=round((time.time() - start_time) * 1000, 2),
    )

    return _render(ChatResponse(
        response=outcome.response,
        conversation_id=outcome.conversation.id,
        is_complete=outcome.is_complete,
        trip=TripOverview.from_trip(outcome.trip) if outcome.trip else None,
    ))


@router.get(
    "/{conversation_id}",
    response_model=ConversationState,
    responses={404: {"model": ErrorResponse}},
)
async def get_conversation(
    conversation_id: str,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> ConversationState:
    """Return the stored state of a conversation"""
    try:
        return orchestrator.get_conversation(conversation_id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
