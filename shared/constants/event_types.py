class EventTypes:
    """Centralised analytics event type definitions"""

    # Widget lifecycle
    WIDGET_LOADED = "widget.loaded"
    BUBBLE_CLICKED = "bubble.clicked"

    # Audio playback
    AUDIO_PLAY = "audio.play"
    AUDIO_PAUSE = "audio.pause"
    AUDIO_COMPLETE = "audio.complete"
    AUDIO_ABANDONED = "audio.abandoned"
    AUDIO_PROGRESS = "audio.progress.{milestone}"

    # Voice feedback
    CONVERSATION_START = "conversation.start"
    INTERACTION_SAVED = "interaction.saved"
    AI_RESPONSE = "ai.response"

    PROGRESS_MILESTONES = (25, 50, 75)

    @classmethod
    def progress(cls, milestone: int) -> str:
        """Generate the progress event type for a milestone percentage."""
        if milestone not in cls.PROGRESS_MILESTONES:
            raise ValueError(f"Unknown progress milestone: {milestone}")
        return cls.AUDIO_PROGRESS.format(milestone=milestone)

    @classmethod
    def all_event_types(cls) -> list[str]:
        return [
            cls.WIDGET_LOADED,
            cls.BUBBLE_CLICKED,
            cls.AUDIO_PLAY,
            cls.AUDIO_PAUSE,
            cls.AUDIO_COMPLETE,
            cls.AUDIO_ABANDONED,
            *(cls.progress(m) for m in cls.PROGRESS_MILESTONES),
            cls.CONVERSATION_START,
            cls.INTERACTION_SAVED,
            cls.AI_RESPONSE,
        ]
