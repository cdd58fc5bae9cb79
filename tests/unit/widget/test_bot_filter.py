import pytest

from widget.analytics.bot_filter import (
    has_suspicious_screen,
    is_bot,
    should_skip_loading,
)
from widget.environment import BrowserEnvironment, NavigatorInfo, ScreenInfo

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def test_googlebot_is_bot():
    ua = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
    assert is_bot(ua, NavigatorInfo(user_agent=ua)) is True


def test_desktop_chrome_is_not_bot():
    assert is_bot(CHROME_UA, NavigatorInfo(user_agent=CHROME_UA)) is False


@pytest.mark.parametrize(
    "ua",
    ["python-requests/2.31.0", "curl/8.4.0", "Mozilla/5.0 ClaudeBot/1.0", "axios/1.6.2"],
)
def test_tool_user_agents_are_bots(ua):
    assert is_bot(ua, NavigatorInfo(user_agent=ua)) is True


def test_empty_user_agent_is_bot():
    assert is_bot("", NavigatorInfo()) is True
    assert is_bot(None, NavigatorInfo()) is True


def test_navigator_flags():
    """Missing navigator, webdriver and disabled cookies all count as bots."""
    assert is_bot(CHROME_UA, None) is True
    assert is_bot(CHROME_UA, NavigatorInfo(user_agent=CHROME_UA, webdriver=True)) is True
    assert (
        is_bot(CHROME_UA, NavigatorInfo(user_agent=CHROME_UA, cookie_enabled=False))
        is True
    )


@pytest.mark.parametrize(
    "width,height,expected",
    [
        (0, 0, True),
        (1920, 0, True),
        (50, 50, True),
        (50, 800, False),
        (12000, 800, True),
        (800, 10001, True),
        (1920, 1080, False),
        (375, 812, False),
    ],
)
def test_suspicious_screen(width, height, expected):
    assert has_suspicious_screen(width, height) is expected


def _environment(**overrides) -> BrowserEnvironment:
    fields = {
        "navigator": NavigatorInfo(user_agent=CHROME_UA),
        "screen": ScreenInfo(width=1440, height=900),
        "page_url": "https://example.com/",
    }
    fields.update(overrides)
    return BrowserEnvironment(**fields)


def test_regular_visitor_loads():
    assert should_skip_loading(_environment()) is False


def test_missing_environment_skips():
    assert should_skip_loading(None) is True


@pytest.mark.parametrize(
    "ua",
    [
        "Mozilla/5.0 (X11; Linux x86_64) HeadlessChrome/124.0.0.0 Safari/537.36",
        CHROME_UA + " Playwright/1.44",
        "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)",
        "Mozilla/5.0 (Windows NT 10.0) Chrome/124.0 Selenium",
        "",
    ],
)
def test_load_time_user_agent_checks(ua):
    assert should_skip_loading(_environment(navigator=NavigatorInfo(user_agent=ua)))


def test_load_time_environment_checks():
    """Webdriver, no fetch, no navigator and an odd screen all skip loading."""
    webdriver = NavigatorInfo(user_agent=CHROME_UA, webdriver=True)
    assert should_skip_loading(_environment(navigator=webdriver)) is True
    assert should_skip_loading(_environment(has_fetch=False)) is True
    assert should_skip_loading(_environment(navigator=None)) is True
    assert should_skip_loading(_environment(screen=ScreenInfo(width=0, height=0)))
