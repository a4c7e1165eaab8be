"""Pydantic schemas"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


KNOWN_CATEGORIES = ("food", "accommodation", "transport", "activity")


class WireModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases"""
    model_config = ConfigDict(populate_by_name=True)


# Itinerary
class Activity(WireModel):
    """A scheduled activity"""
    time: str = Field(..., description="Time label, e.g. '2:00 PM'")
    title: str = Field(..., description="Activity name")
    description: str = Field(..., description="Detailed description")
    location: Optional[str] = Field(None, description="Specific location/address")
    cost: Optional[float] = Field(None, ge=0, description="Estimated cost in dollars")
    category: Optional[str] = Field(None, description="food|accommodation|activity|transport")
    image_prompt: Optional[str] = Field(None, alias="imagePrompt")
    image_url: Optional[str] = Field(None, alias="imageUrl")


class ItineraryDay(WireModel):
    """One day of an itinerary"""
    day: int = Field(..., ge=1, description="1-based day index")
    title: str
    date: Optional[str] = None
    activities: List[Activity] = Field(default_factory=list)


class ItinerarySummary(WireModel):
    total_distance: Optional[str] = Field(None, alias="totalDistance")
    highlights: List[str] = Field(default_factory=list)
    recommendations: Optional[List[str]] = None


class TripItinerary(WireModel):
    """Ordered days plus an optional budget and summary"""
    days: List[ItineraryDay] = Field(default_factory=list)
    total_budget: Optional[float] = Field(None, alias="totalBudget")
    summary: Optional[ItinerarySummary] = None


class TripPreferences(WireModel):
    """Optional structured preferences for one-shot generation"""
    budget: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=1)
    travel_style: Optional[str] = Field(None, alias="travelStyle")
    accommodation: Optional[str] = None


class GeneratedTrip(WireModel):
    """Validated output of itinerary generation"""
    title: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1, description="Trip length in days")
    budget: Optional[float] = Field(None, ge=0, description="Estimated total budget in dollars")
    itinerary: TripItinerary

    @model_validator(mode="after")
    def check_days(self) -> "GeneratedTrip":
        days = [d.day for d in self.itinerary.days]
        if not days:
            raise ValueError("itinerary has no days")
        if days != list(range(1, len(days) + 1)):
            raise ValueError(f"itinerary days must be numbered 1..{len(days)} in order, got {days}")
        return self


# Trips and users
class TripCreate(WireModel):
    """Fields supplied when persisting a trip"""
    user_id: Optional[int] = Field(None, alias="userId")
    title: str
    description: str
    destination: str
    duration: int = Field(..., ge=1)
    budget: Optional[int] = None
    itinerary: TripItinerary
    preferences: Optional[TripPreferences] = None


class Trip(TripCreate):
    """A persisted trip"""
    id: int
    created_at: datetime = Field(..., alias="createdAt")


class TripOverview(WireModel):
    """Trip fields returned by the generate endpoints"""
    id: int
    title: str
    destination: str
    duration: int
    budget: Optional[int] = None
    itinerary: TripItinerary

    @classmethod
    def from_trip(cls, trip: Trip) -> "TripOverview":
        return cls(
            id=trip.id,
            title=trip.title,
            destination=trip.destination,
            duration=trip.duration,
            budget=trip.budget,
            itinerary=trip.itinerary,
        )


class User(WireModel):
    id: int
    username: str


# Conversations
class ConversationTurn(WireModel):
    """A single chat turn"""
    role: Literal["user", "assistant"]
    content: str


class ConversationResponses(WireModel):
    """Slot-filling answers (reserved, not populated)"""
    dates: Optional[str] = None
    vibe: Optional[str] = None
    stay_style: Optional[str] = Field(None, alias="stayStyle")
    activities: Optional[str] = None


class ConversationState(WireModel):
    """State of one multi-turn planning session"""
    id: str
    current_step: Literal["chatting", "completed"] = Field("chatting", alias="currentStep")
    initial_description: str = Field(..., alias="initialDescription")
    conversation_history: List[ConversationTurn] = Field(default_factory=list, alias="conversationHistory")
    responses: ConversationResponses = Field(default_factory=ConversationResponses)
    trip_id: Optional[int] = Field(None, alias="tripId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @property
    def is_complete(self) -> bool:
        return self.current_step == "completed"


class ConversationalReply(WireModel):
    """Model reply for one conversational turn"""
    response: str
    should_generate_itinerary: bool = Field(False, alias="shouldGenerateItinerary")
    full_trip_description: Optional[str] = Field(None, alias="fullTripDescription")


class PromptAnalysis(WireModel):
    """Whether a first message needs follow-up questions"""
    needs_more_info: bool = Field(False, alias="needsMoreInfo")
    question: Optional[str] = None
    reasoning: Optional[str] = None


# Requests / responses
class GenerateTripRequest(WireModel):
    """One-shot generation request"""
    description: str
    preferences: Optional[TripPreferences] = None
    user_id: Optional[int] = Field(None, alias="userId")

    @field_validator("description")
    @classmethod
    def description_long_enough(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("Please provide more details about your trip")
        return value


class GenerateTripResponse(WireModel):
    success: bool = True
    trip: TripOverview


class ChatRequest(WireModel):
    """Chat request"""
    message: str
    conversation_id: Optional[str] = Field(None, alias="conversationId")

    @field_validator("message")
    @classmethod
    def message_not_empty(cls, value: str) -> str:
        if len(value) < 1:
            raise ValueError("Please provide a message")
        return value


class ChatResponse(WireModel):
    """Chat response"""
    success: bool = True
    response: str
    conversation_id: str = Field(..., alias="conversationId")
    is_complete: bool = Field(False, alias="isComplete")
    trip: Optional[TripOverview] = None


class ErrorResponse(WireModel):
    success: bool = False
    error: str
