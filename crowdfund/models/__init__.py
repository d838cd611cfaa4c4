# package marker for crowdfund.models

# Import all models to ensure relationships are properly initialized
from crowdfund.models.user import User
from crowdfund.models.events import Event, EventTag

__all__ = [
    "User",
    "Event",
    "EventTag",
]
