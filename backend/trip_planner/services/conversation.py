"""Conversation orchestration

A conversation starts in ``chatting`` and moves to ``completed`` exactly once,
when a trip has been generated and stored for it. Each turn asks the
generator for a reply; when the reply says it is ready and carries a full trip
description, the trip is generated from that description.
"""
import asyncio
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, Optional

from trip_planner.agents import TripGenerator
from trip_planner.agents.prompts import CONVERSATION_COMPLETION_RESPONSE, DIRECT_COMPLETION_RESPONSE
from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import ConversationState, ConversationTurn, Trip
from .storage import TripStore
from .trip_service import TripService

logger = get_logger(__name__)


class ConversationError(Exception):
    """Base class for conversation lookup/state errors"""


class ConversationNotFoundError(ConversationError):
    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__("Conversation not found")


class ConversationCompletedError(ConversationError):
    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__("Conversation already completed")


@dataclass
class ChatOutcome:
    """Result of handling one chat message"""
    conversation: ConversationState
    response: str
    is_complete: bool = False
    trip: Optional[Trip] = None


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class ConversationOrchestrator:
    """Drives the chatting -> completed flow for each conversation"""

    def __init__(
        self,
        store: TripStore,
        generator: TripGenerator,
        trip_service: TripService,
    ):
        self.store = store
        self.generator = generator
        self.trip_service = trip_service
        self._locks: Dict[str, _LockEntry] = {}

    def start_conversation(self, message: str) -> ConversationState:
        """Create an unsaved conversation seeded with the first message"""
        state = ConversationState(
            id=str(uuid.uuid4()),
            current_step="chatting",
            initial_description=message,
        )
        logger.info(
            "conversation_started",
            conversation_id=state.id,
        )
        return state

    def get_conversation(self, conversation_id: str) -> ConversationState:
        state = self.store.get_conversation(conversation_id)
        if state is None:
            raise ConversationNotFoundError(conversation_id)
        return state

    async def handle_message(
        self,
        message: str,
        conversation_id: Optional[str] = None,
    ) -> ChatOutcome:
        """Process one user message.

        Raises ConversationNotFoundError for an unknown id,
        ConversationCompletedError when the conversation already produced a
        trip, and GenerationError when final itinerary generation fails. In
        every error case the stored conversation is left untouched.
        """
        if conversation_id is None:
            # a fresh id is unknown to other requests until it is saved
            state = self.start_conversation(message)
            return await self._advance(state, message)

        # unknown ids never get a lock entry
        self.get_conversation(conversation_id)

        async with self._conversation_lock(conversation_id):
            state = self.get_conversation(conversation_id)
            if state.is_complete:
                logger.warning(
                    "conversation_message_after_completion",
                    conversation_id=conversation_id,
                    trip_id=state.trip_id,
                )
                raise ConversationCompletedError(conversation_id)
            return await self._advance(state, message)

    async def complete_directly(self, message: str) -> ChatOutcome:
        """Skip the chat and generate a trip straight from the first message"""
        state = self.start_conversation(message)
        trip = await self.trip_service.create_trip(message)
        return self._complete(state, message, DIRECT_COMPLETION_RESPONSE, trip)

    @asynccontextmanager
    async def _conversation_lock(self, conversation_id: str) -> AsyncIterator[None]:
        """Serialise requests for one conversation; the entry lives only while in use"""
        entry = self._locks.get(conversation_id)
        if entry is None:
            entry = self._locks[conversation_id] = _LockEntry()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[conversation_id]

    async def _advance(self, state: ConversationState, message: str) -> ChatOutcome:
        start_time = time.time()

        reply = await self.generator.generate_conversational_reply(
            state.conversation_history,
            message,
        )

        full_description = (reply.full_trip_description or "").strip()
        if reply.should_generate_itinerary and full_description:
            logger.info(
                "conversation_ready_for_itinerary",
                conversation_id=state.id,
                turn_count=len(state.conversation_history),
            )
            trip = await self.trip_service.create_trip(full_description)
            response = reply.response or CONVERSATION_COMPLETION_RESPONSE
            return self._complete(state, message, response, trip)

        if reply.should_generate_itinerary:
            logger.warning(
                "conversation_ready_without_description",
                conversation_id=state.id,
            )

        state.conversation_history.append(ConversationTurn(role="user", content=message))
        state.conversation_history.append(ConversationTurn(role="assistant", content=reply.response))
        saved = self.store.save_conversation(state)

        logger.info(
            "conversation_turn_complete",
            conversation_id=saved.id,
            turn_count=len(saved.conversation_history),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return ChatOutcome(conversation=saved, response=reply.response)

    def _complete(
        self,
        state: ConversationState,
        message: str,
        response: str,
        trip: Trip,
    ) -> ChatOutcome:
        state.conversation_history.append(ConversationTurn(role="user", content=message))
        state.conversation_history.append(ConversationTurn(role="assistant", content=response))
        state.current_step = "completed"
        state.trip_id = trip.id
        saved = self.store.save_conversation(state)

        logger.info(
            "conversation_completed",
            conversation_id=saved.id,
            trip_id=trip.id,
            turn_count=len(saved.conversation_history),
        )
        return ChatOutcome(conversation=saved, response=response, is_complete=True, trip=trip)
