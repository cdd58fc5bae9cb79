import pytest

from widget.analytics.context import get_context, get_device_type, get_utm_params


@pytest.mark.parametrize(
    "ua,expected",
    [
        (
            "Mozilla/5.0 (iPad; CPU OS 17_4 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1",
            "tablet",
        ),
        (
            "Mozilla/5.0 (Linux; Android 13; SM-X700) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            "tablet",
        ),
        (
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1",
            "mobile",
        ),
        (
            "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Mobile Safari/537.36",
            "mobile",
        ),
        (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Safari/605.1.15",
            "desktop",
        ),
    ],
)
def test_device_type(ua, expected):
    assert get_device_type(ua) == expected


def test_utm_params_extracted():
    url = "https://example.com/?utm_source=google&utm_medium=cpc&utm_campaign=spring"

    assert get_utm_params(url) == {
        "utm_source": "google",
        "utm_medium": "cpc",
        "utm_campaign": "spring",
    }


def test_utm_params_skip_missing_and_empty():
    assert get_utm_params("https://example.com/?utm_source=&utm_medium=social") == {
        "utm_medium": "social"
    }
    assert get_utm_params("https://example.com/pricing") == {}


def test_context_snapshot(browser_environment):
    context = get_context(browser_environment)

    assert context.device_type == "desktop"
    assert context.language == "en-GB"
    assert context.screen_resolution == "1920x1080"
    assert context.utm_source == "newsletter"
    assert context.utm_campaign is None


def test_context_payload_omits_absent_utm(browser_environment):
    payload = get_context(browser_environment).to_payload()

    assert payload["deviceType"] == "desktop"
    assert payload["pageUrl"].startswith("https://shop.example.com/pricing?")
    assert payload["referrer"] == "https://www.google.com/"
    assert payload["utmMedium"] == "email"
    assert "utmCampaign" not in payload
