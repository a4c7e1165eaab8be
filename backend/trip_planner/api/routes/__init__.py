from .chat import router as chat_router
from .trips import router as trips_router

__all__ = ["chat_router", "trips_router"]
