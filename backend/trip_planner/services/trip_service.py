"""Generate, enrich and persist trips"""
import time
from typing import Optional

from trip_planner.agents import ActivityImageEnricher, TripGenerator
from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import Trip, TripCreate, TripPreferences
from .storage import TripStore

logger = get_logger(__name__)


class TripService:
    """Shared path from a trip description to a stored Trip"""

    def __init__(
        self,
        store: TripStore,
        generator: TripGenerator,
        enricher: ActivityImageEnricher,
    ):
        self.store = store
        self.generator = generator
        self.enricher = enricher

    async def create_trip(
        self,
        description: str,
        preferences: Optional[TripPreferences] = None,
        user_id: Optional[int] = None,
    ) -> Trip:
        """Raises GenerationError; nothing is stored in that case."""
        start_time = time.time()

        generated = await self.generator.generate_itinerary(description, preferences)
        enriched = await self.enricher.enrich(generated)

        trip = self.store.create_trip(TripCreate(
            user_id=user_id,
            title=enriched.title,
            description=description,
            destination=enriched.destination,
            duration=enriched.duration,
            budget=round(enriched.budget) if enriched.budget is not None else None,
            itinerary=enriched.itinerary,
            preferences=preferences,
        ))

        logger.info(
            "trip_pipeline_complete",
            trip_id=trip.id,
            destination=trip.destination,
            duration=trip.duration,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return trip
