"""
Sentry setup for the weather lookup service.

Events are scrubbed before they leave the process:
  - Authorization / cookie headers on the inbound request and on breadcrumbs
  - the OpenWeatherMap key, which travels as `appid=` in outbound URLs and
    can surface in breadcrumb URLs, query strings and httpx exception text
"""

import re
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from services.weather_lookup.config import settings

REDACTED = "[FILTERED]"
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})

_APPID_RE = re.compile(r"(appid=)[^&\s\"']+", re.IGNORECASE)


def _redact_appid(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return _APPID_RE.sub(rf"\g<1>{REDACTED}", value)


def _redact_headers(headers: Any) -> None:
    if not isinstance(headers, dict):
        return
    for name in headers:
        if name.lower() in SENSITIVE_HEADERS:
            headers[name] = REDACTED


def _scrub_breadcrumbs(event: dict[str, Any]) -> None:
    crumbs = (event.get("breadcrumbs") or {}).get("values") or []
    for crumb in crumbs:
        data = crumb.get("data")
        if not isinstance(data, dict):
            continue
        _redact_headers(data.get("headers"))
        if "url" in data:
            data["url"] = _redact_appid(data["url"])


def _scrub_request(event: dict[str, Any]) -> None:
    request = event.get("request")
    if not isinstance(request, dict):
        return
    _redact_headers(request.get("headers"))
    for field in ("url", "query_string"):
        if field in request:
            request[field] = _redact_appid(request[field])


def _scrub_exceptions(event: dict[str, Any]) -> None:
    # httpx.HTTPStatusError messages embed the full request URL
    for exc in (event.get("exception") or {}).get("values") or []:
        if "value" in exc:
            exc["value"] = _redact_appid(exc["value"])


def scrub_event(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """before_send hook."""
    _scrub_breadcrumbs(event)
    _scrub_request(event)
    _scrub_exceptions(event)
    return event


def setup_sentry() -> None:
    """Initialise Sentry when SENTRY_DSN is set; a no-op otherwise."""
    if not settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"{settings.app_name}@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        before_send=scrub_event,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )
