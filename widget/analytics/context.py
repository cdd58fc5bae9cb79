import re
from typing import Any
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from widget.environment import BrowserEnvironment

# Tablet first: "android" without "mobi" would otherwise read as a phone
TABLET_RE = re.compile(r"(tablet|ipad|playbook|silk)|(android(?!.*mobi))", re.I)
MOBILE_RE = re.compile(
    r"Mobile|Android|iP(hone|od)|IEMobile|BlackBerry|Kindle|Silk-Accelerated"
    r"|(hpw|web)OS|Opera M(obi|ini)",
    re.I,
)

UTM_PARAMS = ("utm_source", "utm_medium", "utm_campaign")


class UserContext(BaseModel):
    device_type: str = Field(..., alias="deviceType")
    user_agent: str = Field(..., alias="userAgent")
    language: str
    screen_resolution: str = Field(..., alias="screenResolution")
    referrer: str = ""
    page_url: str = Field("", alias="pageUrl")
    page_title: str = Field("", alias="pageTitle")
    utm_source: str | None = Field(None, alias="utmSource")
    utm_medium: str | None = Field(None, alias="utmMedium")
    utm_campaign: str | None = Field(None, alias="utmCampaign")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def get_device_type(user_agent: str) -> str:
    ua = user_agent.lower()
    if TABLET_RE.search(ua):
        return "tablet"
    if MOBILE_RE.search(ua):
        return "mobile"
    return "desktop"


def get_utm_params(page_url: str) -> dict[str, str]:
    query = parse_qs(urlsplit(page_url).query)
    params = {}
    for name in UTM_PARAMS:
        values = query.get(name)
        if values and values[0]:
            params[name] = values[0]
    return params


def get_context(environment: BrowserEnvironment) -> UserContext:
    utm = get_utm_params(environment.page_url)
    return UserContext(
        device_type=get_device_type(environment.user_agent),
        user_agent=environment.user_agent,
        language=environment.language,
        screen_resolution=environment.screen.resolution,
        referrer=environment.referrer,
        page_url=environment.page_url,
        page_title=environment.page_title,
        utm_source=utm.get("utm_source"),
        utm_medium=utm.get("utm_medium"),
        utm_campaign=utm.get("utm_campaign"),
    )
