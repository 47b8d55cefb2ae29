"""Environment variables of the hosted CI runner."""

from __future__ import annotations

ENV_REF: str = "GITHUB_REF"
ENV_EVENT_NAME: str = "GITHUB_EVENT_NAME"
ENV_SERVER_URL: str = "GITHUB_SERVER_URL"
ENV_OUTPUT_FILE: str = "GITHUB_OUTPUT"
ENV_STATE_FILE: str = "GITHUB_STATE"

INPUT_ENV_PREFIX: str = "INPUT_"
STATE_ENV_PREFIX: str = "STATE_"

DEFAULT_SERVER_URL: str = "https://github.com"
HOSTED_SERVER_HOSTNAME: str = "GITHUB.COM"

GHES_UNAVAILABLE_MESSAGE: str = (
    "Cache action is only supported on GHES version >= 3.5. If you are on version >=3.5 Please check with "
    "GHES admin if Actions cache service is enabled or not."
)
BACKEND_UNAVAILABLE_MESSAGE: str = (
    "An internal error has occurred in cache backend. "
    "Please check https://www.githubstatus.com/ for any ongoing issue in actions."
)
