"""FastAPI dependencies reading collaborators from app.state"""
from fastapi import Request

from trip_planner.services import ConversationOrchestrator, RoutingPolicy, TripService, TripStore


def get_store(request: Request) -> TripStore:
    return request.app.state.store


def get_trip_service(request: Request) -> TripService:
    return request.app.state.trip_service


def get_orchestrator(request: Request) -> ConversationOrchestrator:
    return request.app.state.orchestrator


def get_routing_policy(request: Request) -> RoutingPolicy:
    return request.app.state.routing_policy
