"""Routing of first chat messages to conversational or direct generation"""
import re
from enum import Enum
from typing import Iterable

from trip_planner.agents import TripGenerator
from trip_planner.config import Settings
from trip_planner.logging_config import get_logger

logger = get_logger(__name__)


class ChatMode(str, Enum):
    CONVERSATIONAL = "conversational"
    DIRECT = "direct"


class RoutingPolicy:
    """Chooses how a conversation starts"""

    async def choose(self, message: str) -> ChatMode:
        raise NotImplementedError


class KeywordRoutingPolicy(RoutingPolicy):
    """Conversational when any keyword appears as a whole word"""

    def __init__(self, keywords: Iterable[str]):
        self.keywords = [kw.lower() for kw in keywords if kw]
        self._pattern = (
            re.compile(r"\b(" + "|".join(re.escape(kw) for kw in self.keywords) + r")\b", re.IGNORECASE)
            if self.keywords
            else None
        )

    async def choose(self, message: str) -> ChatMode:
        match = self._pattern.search(message) if self._pattern else None
        mode = ChatMode.CONVERSATIONAL if match else ChatMode.DIRECT
        logger.debug(
            "routing_decision",
            policy="keywords",
            mode=mode.value,
            matched=match.group(0) if match else None,
        )
        return mode


class AnalysisRoutingPolicy(RoutingPolicy):
    """Conversational when the model says the request needs more detail"""

    def __init__(self, generator: TripGenerator):
        self.generator = generator

    async def choose(self, message: str) -> ChatMode:
        analysis = await self.generator.analyze_prompt(message)
        mode = ChatMode.CONVERSATIONAL if analysis.needs_more_info else ChatMode.DIRECT
        logger.debug(
            "routing_decision",
            policy="analysis",
            mode=mode.value,
            reasoning=analysis.reasoning,
        )
        return mode


def build_routing_policy(settings: Settings, generator: TripGenerator) -> RoutingPolicy:
    if settings.routing_policy == "analysis":
        return AnalysisRoutingPolicy(generator)
    return KeywordRoutingPolicy(settings.conversation_keywords_list)
