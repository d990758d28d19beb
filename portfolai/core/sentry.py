"""Error reporting to Sentry.

Request headers carrying credentials and request bodies (which hold
client-confidential meeting notes) are redacted before an event leaves the
process.
"""

import structlog
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

logger = structlog.get_logger()

REDACTED = "[REDACTED]"
_CREDENTIAL_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


def redact_event(event: dict, hint: dict) -> dict:
    """``before_send`` hook: blank out credentials and the request body."""
    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for name in list(headers):
        if name.lower() in _CREDENTIAL_HEADERS:
            headers[name] = REDACTED
    if "data" in request:
        request["data"] = REDACTED
    return event


def init_sentry(dsn: str | None, environment: str = "development", release: str | None = None) -> None:
    """Configure the Sentry SDK; call before the FastAPI app is built. No-op without a DSN."""
    if not dsn:
        logger.info("sentry.disabled")
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=0.1 if environment == "production" else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            HttpxIntegration(),
        ],
        send_default_pii=False,
        before_send=redact_event,
    )
    logger.info("sentry.initialized", environment=environment, release=release)
