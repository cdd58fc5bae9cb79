from .collections import Collections
from .environments import Environment
from .event_types import EventTypes

__all__ = ["Collections", "Environment", "EventTypes"]
