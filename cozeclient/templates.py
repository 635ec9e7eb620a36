"""Duplicating templates into a workspace."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .request import Core, HTTPResponse


class TemplateEntityType(str, Enum):
    """Kind of entity a template produces."""

    AGENT = "agent"


def _entity_type(value: Any) -> TemplateEntityType | str:
    try:
        return TemplateEntityType(value)
    except ValueError:
        return "" if value is None else str(value)


@dataclass
class TemplateDuplicateResult:
    """The entity created by duplicating a template."""

    entity_id: str = ""
    entity_type: TemplateEntityType | str = ""
    http_response: HTTPResponse | None = field(default=None, compare=False, repr=False)

    @property
    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None, http_response: HTTPResponse | None = None
    ) -> "TemplateDuplicateResult":
        data = data or {}
        return cls(
            entity_id=str(data.get("entity_id") or ""),
            entity_type=_entity_type(data.get("entity_type")),
            http_response=http_response,
        )


class Templates:
    """Template operations of the API."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def duplicate(
        self, template_id: str, workspace_id: str, name: str | None = None
    ) -> TemplateDuplicateResult:
        """Copy a template into ``workspace_id``, optionally under a new name."""
        body: dict[str, Any] = {"workspace_id": workspace_id}
        if name is not None:
            body["name"] = name
        result = self._core.request("POST", f"/v1/templates/{template_id}/duplicate", body=body)
        return TemplateDuplicateResult.from_dict(result.data, result.http_response)