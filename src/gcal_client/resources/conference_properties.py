from dataclasses import dataclass
from typing import List, Optional

from .base import Resource, renamed, validate_choice
from .constants import VALID_CONFERENCE_SOLUTION_TYPES, VALID_REMINDER_METHODS


@dataclass
class ConferenceProperties(Resource):
    """Conferencing options a calendar supports."""
    allowed_solution_types: Optional[List[str]] = renamed("allowedConferenceSolutionTypes")

    def __post_init__(self):
        for solution_type in self.allowed_solution_types or []:
            validate_choice(solution_type, VALID_CONFERENCE_SOLUTION_TYPES, "conference solution type")


@dataclass
class DefaultReminder(Resource):
    """A reminder applied to every event of a calendar unless overridden."""
    method: Optional[str] = None
    minutes: Optional[int] = None

    def __post_init__(self):
        validate_choice(self.method, VALID_REMINDER_METHODS, "reminder method")
        if self.minutes is not None and self.minutes < 0:
            raise ValueError("Reminder minutes cannot be negative")
