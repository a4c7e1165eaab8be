import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from trip_planner.agents import ActivityImageEnricher, TripGenerator
from trip_planner.config import Settings
from trip_planner.main import create_app
from trip_planner.services import (
    ConversationOrchestrator,
    InMemoryTripStore,
    KeywordRoutingPolicy,
    TripService,
)


def make_trip_payload(
    destination: str = "Paris",
    days: int = 2,
    budget: Optional[float] = 850,
    with_images: bool = False,
) -> Dict[str, Any]:
    """A well-formed itinerary reply as the chat model would send it"""
    day_list = []
    for n in range(1, days + 1):
        day_list.append({
            "day": n,
            "title": f"Day {n} in {destination}",
            "activities": [
                {
                    "time": "9:00 AM",
                    "title": f"Breakfast {n}",
                    "description": "Croissants and coffee",
                    "location": "Le Marais",
                    "cost": 15,
                    "category": "food",
                    **({"imagePrompt": f"bakery counter {n}"} if with_images else {}),
                },
                {
                    "time": "2:00 PM",
                    "title": f"Walk {n}",
                    "description": "Stroll along the river",
                    "category": "activity",
                    **({"imagePrompt": f"river view {n}"} if with_images else {}),
                },
            ],
        })
    return {
        "title": f"Weekend in {destination}",
        "destination": destination,
        "duration": days,
        "budget": budget,
        "itinerary": {
            "days": day_list,
            "summary": {
                "totalDistance": "12 km",
                "highlights": ["Food", "Wine"],
                "recommendations": ["Book ahead"],
            },
        },
    }


def chat_reply(response: str, ready: bool = False, description: Optional[str] = None) -> str:
    body: Dict[str, Any] = {"response": response, "shouldGenerateItinerary": ready}
    if description is not None:
        body["fullTripDescription"] = description
    return json.dumps(body)


class FakeChatModel:
    """Stands in for ChatOpenAI; replies are consumed in order"""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies: List[Any] = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *replies: Any) -> None:
        self.replies.extend(replies)

    def bind(self, **kwargs: Any) -> "_BoundFakeChatModel":
        return _BoundFakeChatModel(self, kwargs)


class _BoundFakeChatModel:
    def __init__(self, model: FakeChatModel, kwargs: Dict[str, Any]):
        self.model = model
        self.kwargs = kwargs

    async def ainvoke(self, messages: List[Any]) -> AIMessage:
        self.model.calls.append({"messages": list(messages), "kwargs": self.kwargs})
        if not self.model.replies:
            raise RuntimeError("no reply queued")
        reply = self.model.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return AIMessage(content=reply)


class FakeImageClient:
    """Stands in for AsyncOpenAI; `fail_on` prompts raise"""

    def __init__(self, fail_on: tuple = ()):
        self.prompts: List[str] = []
        self.fail_on = fail_on
        self.images = SimpleNamespace(generate=self._generate)

    async def _generate(self, **kwargs: Any) -> Any:
        prompt = kwargs["prompt"]
        self.prompts.append(prompt)
        if any(token in prompt for token in self.fail_on):
            raise RuntimeError("image service unavailable")
        return SimpleNamespace(data=[SimpleNamespace(url=f"https://img.test/{len(self.prompts)}.png")])


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        image_enrichment_enabled=False,
        debug=True,
        log_level="WARNING",
    )


@pytest.fixture
def chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def store() -> InMemoryTripStore:
    return InMemoryTripStore()


@pytest.fixture
def generator(settings, chat_model) -> TripGenerator:
    return TripGenerator(settings, llm=chat_model)


@pytest.fixture
def enricher(settings, image_client) -> ActivityImageEnricher:
    return ActivityImageEnricher(settings, client=image_client)


@pytest.fixture
def trip_service(store, generator, enricher) -> TripService:
    return TripService(store, generator, enricher)


@pytest.fixture
def orchestrator(store, generator, trip_service) -> ConversationOrchestrator:
    return ConversationOrchestrator(store, generator, trip_service)


@pytest.fixture
def client(settings, store, generator, enricher) -> TestClient:
    app = create_app(
        settings=settings,
        store=store,
        generator=generator,
        enricher=enricher,
        routing_policy=KeywordRoutingPolicy(settings.conversation_keywords_list),
    )
    with TestClient(app) as test_client:
        yield test_client
