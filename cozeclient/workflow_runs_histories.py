"""Looking up the history of workflow executions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping

from .request import Core, HTTPResponse


class WorkflowRunMode(IntEnum):
    """How a workflow was run."""

    SYNCHRONOUS = 0
    STREAMING = 1
    ASYNCHRONOUS = 2


class WorkflowExecuteStatus(str, Enum):
    """Execution status of a workflow run."""

    SUCCESS = "Success"
    RUNNING = "Running"
    FAIL = "Fail"


def _run_mode(value: Any) -> WorkflowRunMode | int:
    number = int(value or 0)
    try:
        return WorkflowRunMode(number)
    except ValueError:
        return number


def _execute_status(value: Any) -> WorkflowExecuteStatus | str:
    try:
        return WorkflowExecuteStatus(value)
    except ValueError:
        return "" if value is None else str(value)


@dataclass
class WorkflowRunHistory:
    """One recorded execution of a workflow."""

    execute_id: str = ""
    execute_status: WorkflowExecuteStatus | str = ""
    bot_id: str = ""
    connector_id: str = ""
    connector_uid: str = ""
    run_mode: WorkflowRunMode | int = WorkflowRunMode.SYNCHRONOUS
    log_id: str = ""
    create_time: int = 0
    update_time: int = 0
    output: str = ""
    error_code: str = ""
    error_message: str = ""
    debug_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "WorkflowRunHistory":
        data = data or {}
        return cls(
            execute_id=str(data.get("execute_id") or ""),
            execute_status=_execute_status(data.get("execute_status")),
            bot_id=str(data.get("bot_id") or ""),
            connector_id=str(data.get("connector_id") or ""),
            connector_uid=str(data.get("connector_uid") or ""),
            run_mode=_run_mode(data.get("run_mode")),
            log_id=str(data.get("logid") or ""),
            create_time=int(data.get("create_time") or 0),
            update_time=int(data.get("update_time") or 0),
            output=str(data.get("output") or ""),
            error_code=str(data.get("error_code") or ""),
            error_message=str(data.get("error_message") or ""),
            debug_url=str(data.get("debug_url") or ""),
        )


@dataclass
class WorkflowRunHistories:
    """The histories returned for one execution lookup."""

    histories: list[WorkflowRunHistory] = field(default_factory=list)
    http_response: HTTPResponse | None = field(default=None, compare=False, repr=False)

    @property
    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""


class WorkflowRunsHistories:
    """Workflow run history operations of the API."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def retrieve(self, workflow_id: str, execute_id: str) -> WorkflowRunHistories:
        """Return the recorded history of one execution of a workflow."""
        path = f"/v1/workflows/{workflow_id}/run_histories/{execute_id}"
        result = self._core.request("GET", path)
        return WorkflowRunHistories(
            histories=[WorkflowRunHistory.from_dict(item) for item in result.data or []],
            http_response=result.http_response,
        )