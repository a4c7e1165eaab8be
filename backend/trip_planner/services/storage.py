"""Trip and conversation storage"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import ConversationState, Trip, TripCreate, User

logger = get_logger(__name__)


class TripStore(ABC):
    """Keyed storage for trips, users and conversation state"""

    @abstractmethod
    def create_trip(self, trip: TripCreate) -> Trip: ...

    @abstractmethod
    def get_trip(self, trip_id: int) -> Optional[Trip]: ...

    @abstractmethod
    def get_all_trips(self) -> List[Trip]: ...

    @abstractmethod
    def get_trips_by_user(self, user_id: int) -> List[Trip]: ...

    @abstractmethod
    def get_conversation(self, conversation_id: str) -> Optional[ConversationState]: ...

    @abstractmethod
    def save_conversation(self, state: ConversationState) -> ConversationState: ...

    @abstractmethod
    def create_user(self, username: str) -> User: ...

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...


class InMemoryTripStore(TripStore):
    """Process-lifetime store; everything is lost on restart"""

    def __init__(self):
        self._trips: Dict[int, Trip] = {}
        self._users: Dict[int, User] = {}
        self._conversations: Dict[str, ConversationState] = {}
        self._current_trip_id = 1
        self._current_user_id = 1
        logger.info("trip_store_initialized", backend="memory")

    # Trips
    def create_trip(self, trip: TripCreate) -> Trip:
        trip_id = self._current_trip_id
        self._current_trip_id += 1

        stored = Trip(
            **trip.model_dump(),
            id=trip_id,
            created_at=datetime.now(),
        )
        self._trips[trip_id] = stored

        logger.info(
            "trip_created",
            trip_id=trip_id,
            user_id=stored.user_id,
            destination=stored.destination,
            total_trips=len(self._trips),
        )
        return stored.model_copy(deep=True)

    def get_trip(self, trip_id: int) -> Optional[Trip]:
        trip = self._trips.get(trip_id)
        logger.debug("trip_get", trip_id=trip_id, hit=trip is not None)
        return trip.model_copy(deep=True) if trip else None

    def get_all_trips(self) -> List[Trip]:
        return [trip.model_copy(deep=True) for trip in self._trips.values()]

    def get_trips_by_user(self, user_id: int) -> List[Trip]:
        return [
            trip.model_copy(deep=True)
            for trip in self._trips.values()
            if trip.user_id == user_id
        ]

    # Conversations
    def get_conversation(self, conversation_id: str) -> Optional[ConversationState]:
        state = self._conversations.get(conversation_id)

        if state:
            logger.debug(
                "conversation_get_hit",
                conversation_id=conversation_id,
                turn_count=len(state.conversation_history),
                current_step=state.current_step,
            )
        else:
            logger.debug(
                "conversation_get_miss",
                conversation_id=conversation_id,
            )

        return state.model_copy(deep=True) if state else None

    def save_conversation(self, state: ConversationState) -> ConversationState:
        now = datetime.now()
        stored = state.model_copy(deep=True)
        stored.created_at = stored.created_at or now
        stored.updated_at = now
        self._conversations[stored.id] = stored

        logger.debug(
            "conversation_saved",
            conversation_id=stored.id,
            current_step=stored.current_step,
            turn_count=len(stored.conversation_history),
            total_conversations=len(self._conversations),
        )
        return stored.model_copy(deep=True)

    # Users
    def create_user(self, username: str) -> User:
        if self.get_user_by_username(username) is not None:
            raise ValueError(f"Username already exists: {username}")
        user_id = self._current_user_id
        self._current_user_id += 1
        user = User(id=user_id, username=username)
        self._users[user_id] = user
        logger.info("user_created", user_id=user_id, username=username)
        return user.model_copy()

    def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user.model_copy()
        return None
