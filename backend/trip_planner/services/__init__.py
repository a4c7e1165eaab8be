from .conversation import (
    ChatOutcome,
    ConversationCompletedError,
    ConversationError,
    ConversationNotFoundError,
    ConversationOrchestrator,
)
from .routing import AnalysisRoutingPolicy, ChatMode, KeywordRoutingPolicy, RoutingPolicy, build_routing_policy
from .storage import InMemoryTripStore, TripStore
from .trip_service import TripService

__all__ = [
    "AnalysisRoutingPolicy",
    "ChatMode",
    "ChatOutcome",
    "ConversationCompletedError",
    "ConversationError",
    "ConversationNotFoundError",
    "ConversationOrchestrator",
    "InMemoryTripStore",
    "KeywordRoutingPolicy",
    "RoutingPolicy",
    "TripService",
    "TripStore",
    "build_routing_policy",
]
