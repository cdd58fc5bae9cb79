"""Model of the page's audio element.

The host drives it (``load``, ``set_metadata``, ``time_update``, ``finish``)
and it publishes the media events the analytics bridge listens to:
``loadstart``, ``loadedmetadata``, ``play``, ``pause``, ``timeupdate`` and
``ended``.
"""

from widget.events import EventBus


class AudioPlayer:
    def __init__(self, bus: EventBus):
        self.bus = bus
        self.src: str | None = None
        self.duration: float | None = None
        self.current_time = 0.0
        self.playing = False

    @property
    def has_source(self) -> bool:
        return self.src is not None

    async def load(self, src: str, duration: float | None = None) -> None:
        if self.playing:
            await self.pause()
        self.src = src
        self.duration = None
        self.current_time = 0.0
        await self.bus.publish("loadstart", src=src)
        if duration is not None:
            await self.set_metadata(duration)

    async def set_metadata(self, duration: float) -> None:
        self.duration = duration
        await self.bus.publish("loadedmetadata", duration=duration)

    async def play(self) -> None:
        if not self.has_source or self.playing:
            return
        self.playing = True
        await self.bus.publish("play", current_time=self.current_time)

    async def pause(self) -> None:
        if not self.playing:
            return
        self.playing = False
        await self.bus.publish("pause", current_time=self.current_time)

    async def time_update(self, current_time: float) -> None:
        self.current_time = current_time
        await self.bus.publish(
            "timeupdate", current_time=current_time, duration=self.duration
        )

    async def finish(self) -> None:
        if self.duration is not None:
            self.current_time = self.duration
        self.playing = False
        await self.bus.publish("ended", duration=self.duration)
