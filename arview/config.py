"""
Configuration for the AR viewer and the match API.
"""
from pydantic import BaseModel
import os

class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    EXPERIENCES_PATH: str = os.getenv("EXPERIENCES_PATH", "data/experiences.json")
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10"))

    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    ORB_FEATURES: int = int(os.getenv("ORB_FEATURES", "1000"))
    MIN_GOOD_MATCHES: int = int(os.getenv("MIN_GOOD_MATCHES", "15"))
    FOUND_HYSTERESIS: int = int(os.getenv("FOUND_HYSTERESIS", "2"))
    LOST_HYSTERESIS: int = int(os.getenv("LOST_HYSTERESIS", "5"))
    HINT_TEXT: str = os.getenv("HINT_TEXT", "Point your camera at the marker to view AR content")

    def __init__(self, **data):
        super().__init__(**data)
        # Counts below 1 would make the tracker latch on nothing
        for name in ("ORB_FEATURES", "MIN_GOOD_MATCHES", "FOUND_HYSTERESIS", "LOST_HYSTERESIS"):
            object.__setattr__(self, name, max(1, int(getattr(self, name))))
        if self.HTTP_TIMEOUT <= 0:
            object.__setattr__(self, "HTTP_TIMEOUT", 10.0)
