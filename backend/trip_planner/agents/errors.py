"""Generation errors"""


class GenerationError(Exception):
    """Itinerary generation failed upstream or produced an unusable payload"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to generate trip itinerary: {reason}")
