"""Visitor-side voice widget and its analytics pipeline."""

from widget.environment import BrowserEnvironment, NavigatorInfo, ScreenInfo
from widget.widget import VoiceHeroWidget

__all__ = ["BrowserEnvironment", "NavigatorInfo", "ScreenInfo", "VoiceHeroWidget"]
