from .schemas import (
    Activity,
    ChatRequest,
    ChatResponse,
    ConversationalReply,
    ConversationState,
    ConversationTurn,
    GeneratedTrip,
    GenerateTripRequest,
    GenerateTripResponse,
    ItineraryDay,
    PromptAnalysis,
    Trip,
    TripCreate,
    TripItinerary,
    TripOverview,
    TripPreferences,
    User,
)

__all__ = [
    "Activity",
    "ChatRequest",
    "ChatResponse",
    "ConversationalReply",
    "ConversationState",
    "ConversationTurn",
    "GeneratedTrip",
    "GenerateTripRequest",
    "GenerateTripResponse",
    "ItineraryDay",
    "PromptAnalysis",
    "Trip",
    "TripCreate",
    "TripItinerary",
    "TripOverview",
    "TripPreferences",
    "User",
]
