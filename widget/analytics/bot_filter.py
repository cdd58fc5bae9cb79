"""Heuristic bot detection.

Two checks share the same inputs. ``should_skip_loading`` runs once, before
the widget initialises at all; ``is_bot`` runs when the analytics pipeline
is built and gates every ``track`` call. Both lean towards letting traffic
through: a missed bot costs one polluted event, a false positive silences
the widget for a real visitor.
"""

from widget.core.config import Settings, settings
from widget.environment import BrowserEnvironment, NavigatorInfo


def _contains_any(haystack: str, patterns: list[str]) -> bool:
    return any(p.lower() in haystack for p in patterns)


def is_bot(
    user_agent: str | None,
    navigator: NavigatorInfo | None,
    config: Settings = settings,
) -> bool:
    ua = (user_agent or "").lower()
    if not ua:
        return True
    if _contains_any(ua, config.bot_filter_event_patterns):
        return True
    if navigator is None:
        return True
    return navigator.webdriver or not navigator.cookie_enabled


def has_suspicious_screen(
    width: int, height: int, config: Settings = settings
) -> bool:
    low = config.bot_filter_min_screen_px
    high = config.bot_filter_max_screen_px
    return (
        width == 0
        or height == 0
        or (width < low and height < low)
        or width > high
        or height > high
    )


def should_skip_loading(
    environment: BrowserEnvironment | None, config: Settings = settings
) -> bool:
    """Stricter load-time check; True means the widget must not start."""
    if environment is None:
        return True

    raw_ua = environment.user_agent
    if any(p in raw_ua for p in config.bot_filter_test_harness_patterns):
        return True

    ua = raw_ua.lower()
    if not ua:
        return True
    if _contains_any(ua, config.bot_filter_load_patterns):
        return True

    navigator = environment.navigator
    if (navigator is not None and navigator.webdriver) or _contains_any(
        ua, config.bot_filter_automation_patterns
    ):
        return True

    if not environment.has_fetch or navigator is None:
        return True

    return has_suspicious_screen(
        environment.screen.width, environment.screen.height, config
    )
