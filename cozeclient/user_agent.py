"""User-agent headers sent with every request."""

from __future__ import annotations

import json
import os
import platform
from typing import Mapping

VERSION = "0.1.0"

_SDK = "cozeclient"
_LANG = "python"
_LANG_VERSION = platform.python_version()
_OS_NAME = platform.system().lower()
_OS_VERSION = os.environ.get("OSVERSION", "")

_USER_AGENT = f"{_SDK}/{VERSION} {_LANG}/{_LANG_VERSION} {_OS_NAME}/{_OS_VERSION}"
_CLIENT_USER_AGENT = json.dumps(
    {
        "version": VERSION,
        "lang": _SDK,
        "lang_version": _LANG_VERSION,
        "os_name": _OS_NAME,
        "os_version": _OS_VERSION,
    },
    separators=(",", ":"),
)

_AGENT_HEADERS = {"user-agent", "x-coze-client-user-agent"}


def user_agent() -> str:
    """Return the value of the ``User-Agent`` header."""
    return _USER_AGENT


def client_user_agent() -> str:
    """Return the JSON value of the ``X-Coze-Client-User-Agent`` header."""
    return _CLIENT_USER_AGENT


def apply_user_agent(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with both user-agent headers set."""
    merged = {key: value for key, value in headers.items() if key.lower() not in _AGENT_HEADERS}
    merged["User-Agent"] = _USER_AGENT
    merged["X-Coze-Client-User-Agent"] = _CLIENT_USER_AGENT
    return merged