from shared.config import BaseServiceConfig


class Settings(BaseServiceConfig):
    # Embedding
    widget_api_base: str = ""
    widget_site_id: str | None = None
    widget_script_url: str = ""

    # Delivery
    widget_flush_interval_seconds: float = 10.0
    widget_queue_max_size: int = 100
    widget_eager_flush_threshold: int = 50
    widget_request_timeout_seconds: float = 5.0
    widget_beacon_max_bytes: int = 65_536  # navigator.sendBeacon payload limit

    # Browser state
    widget_session_storage_key: str = "vh-session-id"
    widget_storage_path: str | None = None  # None keeps state in memory
    widget_returning_cookie: str = "vh_returning"
    widget_returning_cookie_max_age: int = 31_536_000  # one year

    # Bot filter, per-event check (case-insensitive substrings)
    bot_filter_event_patterns: list[str] = [
        "bot",
        "crawler",
        "spider",
        "scraper",
        "curl",
        "wget",
        "python",
        "node-fetch",
        "axios",
        "go-http-client",
        "java/",
        "php",
        "ruby",
        "perl",
        "googlebot",
        "bingbot",
        "chatgpt",
        "claude",
        "anthropic",
        "openai",
    ]
    # Bot filter, load-time check
    bot_filter_test_harness_patterns: list[str] = ["Playwright", "HeadlessChrome"]
    bot_filter_load_patterns: list[str] = [
        "/bot",
        "/crawler",
        "/spider",
        "/scraper",
        "curl/",
        "wget/",
        "python-requests/",
        "node-fetch/",
        "axios/",
        "go-http-client/",
        "java/",
        "php/",
        "ruby/",
        "perl/",
        "googlebot/",
        "bingbot/",
        "slurp/",
        "duckduckbot/",
        "chatgpt",
        "claude",
        "anthropic",
        "openai",
        "headlesschrome",
        "phantomjs",
    ]
    bot_filter_automation_patterns: list[str] = [
        "selenium",
        "puppeteer",
        "playwright",
        "webdriver",
    ]
    bot_filter_min_screen_px: int = 100
    bot_filter_max_screen_px: int = 10_000

    service_name: str = "widget"


settings = Settings()
