import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from trip_planner.agents import GenerationError
from trip_planner.agents.prompts import CONVERSATION_FALLBACK_RESPONSE, build_itinerary_user_prompt
from trip_planner.models.schemas import ConversationTurn, TripPreferences

from conftest import chat_reply, make_trip_payload


async def test_generate_itinerary_returns_validated_trip(generator, chat_model):
    chat_model.queue(make_trip_payload(destination="Paris", days=2))

    trip = await generator.generate_itinerary("Weekend trip to Paris for food and wine")

    assert trip.destination == "Paris"
    assert trip.duration == 2
    assert len(trip.itinerary.days) == 2

    call = chat_model.calls[0]
    assert call["kwargs"]["response_format"] == {"type": "json_object"}
    assert call["kwargs"]["temperature"] == 0.7
    system, user = call["messages"]
    assert isinstance(system, SystemMessage)
    assert isinstance(user, HumanMessage)
    assert "Weekend trip to Paris for food and wine" in user.content


async def test_generate_itinerary_includes_preferences(generator, chat_model):
    chat_model.queue(make_trip_payload())
    preferences = TripPreferences(budget=1200, travel_style="foodie")

    await generator.generate_itinerary("Weekend trip to Paris", preferences)

    prompt = chat_model.calls[0]["messages"][1].content
    assert "- Budget: $1200" in prompt
    assert "- Duration: flexible" in prompt
    assert "- Travel style: foodie" in prompt
    assert "- Accommodation preference: not specified" in prompt


def test_user_prompt_without_preferences_has_no_block():
    prompt = build_itinerary_user_prompt("Ten days in Japan")
    assert "Additional preferences" not in prompt


async def test_generate_itinerary_upstream_error(generator, chat_model):
    chat_model.queue(RuntimeError("rate limited"))

    with pytest.raises(GenerationError, match="Failed to generate trip itinerary: rate limited"):
        await generator.generate_itinerary("Weekend trip to Paris")


async def test_generate_itinerary_malformed_json(generator, chat_model):
    chat_model.queue("Sure! Here is your trip")

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate_itinerary("Weekend trip to Paris")
    assert "malformed JSON" in exc_info.value.reason


async def test_generate_itinerary_missing_fields(generator, chat_model):
    payload = make_trip_payload()
    del payload["itinerary"]
    chat_model.queue(payload)

    with pytest.raises(GenerationError, match="missing required fields: itinerary"):
        await generator.generate_itinerary("Weekend trip to Paris")


async def test_conversational_reply_passes_history(generator, chat_model):
    chat_model.queue(chat_reply("How many days?"))
    history = [
        ConversationTurn(role="user", content="Family trip to Italy"),
        ConversationTurn(role="assistant", content="Lovely! When?"),
    ]

    reply = await generator.generate_conversational_reply(history, "In June")

    assert reply.response == "How many days?"
    assert not reply.should_generate_itinerary
    messages = chat_model.calls[0]["messages"]
    assert isinstance(messages[0], SystemMessage)
    assert isinstance(messages[1], HumanMessage)
    assert isinstance(messages[2], AIMessage)
    assert messages[-1].content == "In June"
    assert chat_model.calls[0]["kwargs"]["temperature"] == 0.8


async def test_conversational_reply_falls_back_on_error(generator, chat_model):
    chat_model.queue(RuntimeError("boom"))

    reply = await generator.generate_conversational_reply([], "Family trip")

    assert reply.response == CONVERSATION_FALLBACK_RESPONSE
    assert reply.should_generate_itinerary is False


async def test_conversational_reply_falls_back_on_bad_json(generator, chat_model):
    chat_model.queue("not json at all")

    reply = await generator.generate_conversational_reply([], "Family trip")

    assert reply.response == CONVERSATION_FALLBACK_RESPONSE


async def test_analyze_prompt(generator, chat_model):
    chat_model.queue({"needsMoreInfo": True, "question": "Where to?", "reasoning": "vague"})

    analysis = await generator.analyze_prompt("plan a trip to Europe")

    assert analysis.needs_more_info
    assert analysis.question == "Where to?"


async def test_analyze_prompt_failure_proceeds_without_questions(generator, chat_model):
    chat_model.queue(RuntimeError("down"))

    analysis = await generator.analyze_prompt("plan a trip to Europe")

    assert analysis.needs_more_info is False
