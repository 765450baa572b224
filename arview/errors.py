"""
Error taxonomy for scoring, playback and experience lookup.
"""


class ARViewError(Exception):
    """Base class for errors raised by this package."""


class DecodeError(ARViewError):
    """An image source could not be rasterized."""


class EmptyInputError(ARViewError):
    """An image source yielded zero pixels."""


class PlaybackError(ARViewError):
    """The overlay media refused to start playing."""


class ExperienceError(ARViewError):
    pass


class MissingExperienceIdError(ExperienceError):
    def __init__(self):
        super().__init__("No AR experience ID provided")


class ExperienceNotFoundError(ExperienceError):
    def __init__(self, experience_id: str):
        super().__init__(f"AR experience not found: {experience_id}")
        self.experience_id = experience_id
