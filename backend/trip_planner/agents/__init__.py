from .errors import GenerationError
from .image_enricher import ActivityImageEnricher
from .trip_generator import TripGenerator

__all__ = [
    "ActivityImageEnricher",
    "GenerationError",
    "TripGenerator",
]
