"""Snapshot of the host page the widget runs in.

The pipeline never reaches for globals: everything it knows about the
browser (navigator flags, screen, location, document) is handed to it as a
``BrowserEnvironment``.
"""

from pydantic import BaseModel, Field


class NavigatorInfo(BaseModel):
    user_agent: str = Field("", description="navigator.userAgent")
    language: str = Field("en-US", description="navigator.language")
    webdriver: bool = Field(False, description="Set by automation frameworks")
    cookie_enabled: bool = True


class ScreenInfo(BaseModel):
    width: int = 0
    height: int = 0

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


class BrowserEnvironment(BaseModel):
    navigator: NavigatorInfo | None = Field(default_factory=NavigatorInfo)
    screen: ScreenInfo = Field(default_factory=ScreenInfo)
    page_url: str = Field("", description="window.location.href")
    page_title: str = ""
    referrer: str = ""
    has_fetch: bool = True
    visibility_state: str = "visible"

    @property
    def user_agent(self) -> str:
        return self.navigator.user_agent if self.navigator else ""

    @property
    def language(self) -> str:
        return self.navigator.language if self.navigator else ""

    @property
    def page_url_without_query(self) -> str:
        return self.page_url.split("?", 1)[0]
