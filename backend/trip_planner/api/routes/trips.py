"""Trip API endpoints"""
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from trip_planner.agents import GenerationError
from trip_planner.api.deps import get_store, get_trip_service
from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import (
    ErrorResponse,
    GenerateTripRequest,
    GenerateTripResponse,
    Trip,
    TripOverview,
)
from trip_planner.services import TripService, TripStore

router = APIRouter(prefix="/api/trips", tags=["trips"])
logger = get_logger(__name__)


@router.post(
    "/generate",
    response_model=GenerateTripResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_trip(
    request: GenerateTripRequest,
    trip_service: TripService = Depends(get_trip_service),
) -> GenerateTripResponse:
    """Generate and store an itinerary from a single description"""
    start_time = time.time()

    logger.info(
        "trip_generate_request_received",
        user_id=request.user_id,
        description_length=len(request.description),
        has_preferences=request.preferences is not None,
    )

    try:
        trip = await trip_service.create_trip(
            request.description,
            preferences=request.preferences,
            user_id=request.user_id,
        )
    except GenerationError as e:
        logger.error(
            "trip_generation_error",
            error=str(e),
            reason=e.reason,
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(
            "trip_generation_unexpected_error",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise HTTPException(status_code=500, detail="Failed to generate trip")

    logger.info(
        "trip_generate_response_sent",
        trip_id=trip.id,
        total_duration_ms=round((time.time() - start_time) * 1000, 2),
    )
    return GenerateTripResponse(trip=TripOverview.from_trip(trip))


@router.get("", response_model=List[Trip])
async def list_trips(
    user_id: Optional[int] = Query(None, alias="userId"),
    store: TripStore = Depends(get_store),
) -> List[Trip]:
    """List stored trips, optionally only those of one user"""
    if user_id is not None:
        trips = store.get_trips_by_user(user_id)
    else:
        trips = store.get_all_trips()

    logger.debug(
        "trips_listed",
        user_id=user_id,
        trip_count=len(trips),
    )
    return trips


@router.get(
    "/{trip_id}",
    response_model=Trip,
    responses={404: {"model": ErrorResponse}},
)
async def get_trip(
    trip_id: str,
    store: TripStore = Depends(get_store),
) -> Trip:
    # non-numeric ids cannot match a stored trip
    trip = store.get_trip(int(trip_id)) if trip_id.isascii() and trip_id.isdigit() else None
    if trip is None:
        logger.warning(
            "trip_not_found",
            trip_id=trip_id,
        )
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip
