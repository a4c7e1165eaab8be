"""Itinerary and conversational generation through the chat model"""
import time
from typing import Any, List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from trip_planner.config import Settings, get_settings
from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import (
    ConversationalReply,
    ConversationTurn,
    GeneratedTrip,
    PromptAnalysis,
    TripPreferences,
)
from .errors import GenerationError
from .parsing import decode_conversational_reply, decode_generated_trip, load_json_object
from .prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    CONVERSATION_FALLBACK_RESPONSE,
    CONVERSATION_SYSTEM_PROMPT,
    ITINERARY_SYSTEM_PROMPT,
    build_analysis_user_prompt,
    build_itinerary_user_prompt,
)

logger = get_logger(__name__)

JSON_MODE = {"type": "json_object"}


def _preview(text: str, limit: int = 100) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class TripGenerator:
    """Wraps the chat model for itinerary, chat and analysis calls"""

    def __init__(self, settings: Optional[Settings] = None, llm: Any = None):
        self.settings = settings or get_settings()
        self._llm = llm

    @property
    def llm(self) -> Any:
        # Built on first use so the app can start without an API key
        if self._llm is None:
            logger.info(
                "llm_initialization",
                model=self.settings.openai_model,
            )
            self._llm = ChatOpenAI(
                model=self.settings.openai_model,
                api_key=self.settings.openai_api_key,
            )
        return self._llm

    async def _complete_json(self, messages: List[BaseMessage], temperature: float) -> str:
        """Invoke the model in JSON mode and return the raw text"""
        bound = self.llm.bind(response_format=JSON_MODE, temperature=temperature)
        response = await bound.ainvoke(messages)
        return response.content

    async def generate_itinerary(
        self,
        description: str,
        preferences: Optional[TripPreferences] = None,
    ) -> GeneratedTrip:
        """Generate a full itinerary. Raises GenerationError on any failure."""
        start_time = time.time()

        logger.info(
            "itinerary_generation_start",
            description_preview=_preview(description),
            has_preferences=preferences is not None,
        )

        messages = [
            SystemMessage(content=ITINERARY_SYSTEM_PROMPT),
            HumanMessage(content=build_itinerary_user_prompt(description, preferences)),
        ]

        try:
            raw = await self._complete_json(messages, self.settings.itinerary_temperature)
        except Exception as e:
            logger.error(
                "itinerary_generation_upstream_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GenerationError(str(e) or type(e).__name__) from e

        result = decode_generated_trip(raw)
        if not result.ok:
            logger.error(
                "itinerary_decode_failed",
                reason=result.reason,
                raw_preview=_preview(result.raw, 500),
            )
            raise GenerationError(result.reason)

        trip = result.trip
        logger.info(
            "itinerary_generation_complete",
            title=trip.title,
            destination=trip.destination,
            duration=trip.duration,
            day_count=len(trip.itinerary.days),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return trip

    async def generate_conversational_reply(
        self,
        history: Sequence[ConversationTurn],
        new_message: str,
    ) -> ConversationalReply:
        """Produce the next assistant turn. Falls back to a generic prompt on failure."""
        logger.debug(
            "conversational_reply_start",
            history_length=len(history),
            message_preview=_preview(new_message),
        )

        messages: List[BaseMessage] = [SystemMessage(content=CONVERSATION_SYSTEM_PROMPT)]
        messages.extend(self._convert_turns(history))
        messages.append(HumanMessage(content=new_message))

        try:
            raw = await self._complete_json(messages, self.settings.chat_temperature)
            reply = decode_conversational_reply(raw)
        except Exception as e:
            logger.warning(
                "conversational_reply_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return ConversationalReply(
                response=CONVERSATION_FALLBACK_RESPONSE,
                should_generate_itinerary=False,
            )

        logger.debug(
            "conversational_reply_complete",
            should_generate_itinerary=reply.should_generate_itinerary,
            has_full_description=bool(reply.full_trip_description),
        )
        return reply

    async def analyze_prompt(self, user_prompt: str) -> PromptAnalysis:
        """Decide whether a request needs follow-up questions"""
        messages = [
            SystemMessage(content=ANALYSIS_SYSTEM_PROMPT),
            HumanMessage(content=build_analysis_user_prompt(user_prompt)),
        ]
        try:
            raw = await self._complete_json(messages, self.settings.analysis_temperature)
            analysis = PromptAnalysis.model_validate(load_json_object(raw))
        except Exception as e:
            logger.warning(
                "prompt_analysis_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return PromptAnalysis(needs_more_info=False)

        logger.debug(
            "prompt_analysis_complete",
            needs_more_info=analysis.needs_more_info,
            reasoning=analysis.reasoning,
        )
        return analysis

    def _convert_turns(self, turns: Sequence[ConversationTurn]) -> List[BaseMessage]:
        """Convert stored turns to LangChain messages"""
        lc_messages: List[BaseMessage] = []
        for turn in turns:
            if turn.role == "user":
                lc_messages.append(HumanMessage(content=turn.content))
            elif turn.role == "assistant":
                lc_messages.append(AIMessage(content=turn.content))
        return lc_messages
