"""The current user's account."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .request import Core, HTTPResponse

_ME_PATH = "/v1/users/me"


@dataclass
class User:
    """A user of the API."""

    user_id: str = ""
    user_name: str = ""
    nick_name: str = ""
    avatar_url: str = ""
    http_response: HTTPResponse | None = field(default=None, compare=False, repr=False)

    @property
    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None, http_response: HTTPResponse | None = None
    ) -> "User":
        data = data or {}
        return cls(
            user_id=str(data.get("user_id") or ""),
            user_name=str(data.get("user_name") or ""),
            nick_name=str(data.get("nick_name") or ""),
            avatar_url=str(data.get("avatar_url") or ""),
            http_response=http_response,
        )


class Users:
    """User operations of the API."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def me(self) -> User:
        """Return the user the credentials belong to."""
        result = self._core.request("GET", _ME_PATH)
        return User.from_dict(result.data, result.http_response)