"""Activity image enrichment"""
from typing import Any, Optional

from openai import AsyncOpenAI

from trip_planner.config import Settings, get_settings
from trip_planner.logging_config import get_logger
from trip_planner.models.schemas import Activity, GeneratedTrip

logger = get_logger(__name__)

IMAGE_CATEGORIES = ("food", "accommodation")
IMAGE_STYLE_SUFFIX = ", high quality, photorealistic, travel photography style"


class ActivityImageEnricher:
    """Fills imageUrl on a small number of food and accommodation activities"""

    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.settings.openai_api_key)
        return self._client

    @staticmethod
    def wants_image(activity: Activity) -> bool:
        return bool(activity.image_prompt) and activity.category in IMAGE_CATEGORIES

    async def enrich(self, trip: GeneratedTrip) -> GeneratedTrip:
        """Return a copy of the trip with images added where possible"""
        enriched = trip.model_copy(deep=True)

        if not self.settings.image_enrichment_enabled:
            return enriched

        max_images = self.settings.max_activity_images
        max_attempts = max(self.settings.max_image_attempts, max_images)
        image_count = 0
        attempts = 0

        for day in enriched.itinerary.days:
            for activity in day.activities:
                if image_count >= max_images:
                    return enriched
                if attempts >= max_attempts:
                    logger.warning(
                        "activity_image_attempts_exhausted",
                        attempts=attempts,
                        image_count=image_count,
                    )
                    return enriched
                if not self.wants_image(activity):
                    continue

                attempts += 1
                url = await self._generate_image(activity)
                if url:
                    activity.image_url = url
                    image_count += 1
                    logger.info(
                        "activity_image_generated",
                        count=image_count,
                        max_images=max_images,
                        activity=activity.title,
                    )

        return enriched

    async def _generate_image(self, activity: Activity) -> Optional[str]:
        try:
            response = await self.client.images.generate(
                model=self.settings.image_model,
                prompt=f"{activity.image_prompt}{IMAGE_STYLE_SUFFIX}",
                n=1,
                size=self.settings.image_size,
                quality=self.settings.image_quality,
            )
            return response.data[0].url
        except Exception as e:
            logger.warning(
                "activity_image_failed",
                activity=activity.title,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
