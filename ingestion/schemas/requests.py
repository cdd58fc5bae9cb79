from typing import Any

from pydantic import BaseModel, Field


class IngestRequest(BaseModel):
    """``{event}`` for a single send, ``{events: [...]}`` for a batch or beacon.

    Both keys stay untyped here: a wrong shape is answered with the
    endpoint's own 400 message rather than a framework 422, and each event
    is validated separately so the response can tell a bad single event
    from a bad batch member.
    """

    event: Any = Field(None, description="Single event")
    events: Any = Field(None, description="Batched events")

    @property
    def has_event(self) -> bool:
        # An empty object or list still counts as present
        if isinstance(self.event, (dict, list)):
            return True
        return bool(self.event)

    @property
    def has_batch(self) -> bool:
        return isinstance(self.events, list)
