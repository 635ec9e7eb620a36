"""Running workflows and reading the events of streamed runs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping

from .request import Core, HTTPResponse
from .stream_reader import Stream
from .workflow_runs_histories import WorkflowRunsHistories

_RUN_PATH = "/v1/workflow/run"
_STREAM_RUN_PATH = "/v1/workflow/stream_run"
_STREAM_RESUME_PATH = "/v1/workflow/stream_resume"


class WorkflowEventType(str, Enum):
    """Kind of event in a streamed workflow run."""

    MESSAGE = "Message"
    ERROR = "Error"
    DONE = "Done"
    INTERRUPT = "Interrupt"


def _load_object(data: str) -> dict[str, Any]:
    value = json.loads(data)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got: {data}")
    return value


@dataclass
class WorkflowEventMessage:
    """Output of a workflow node."""

    content: str = ""
    node_title: str = ""
    node_seq_id: str = ""
    node_is_finish: bool = False
    ext: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowEventMessage":
        ext = data.get("ext")
        return cls(
            content=str(data.get("content") or ""),
            node_title=str(data.get("node_title") or ""),
            node_seq_id=str(data.get("node_seq_id") or ""),
            node_is_finish=bool(data.get("node_is_finish") or False),
            ext=dict(ext) if isinstance(ext, dict) else None,
        )


@dataclass
class WorkflowEventInterruptData:
    """Identifies an interruption; both values are passed back on resume."""

    event_id: str = ""
    type: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowEventInterruptData":
        return cls(
            event_id=str(data.get("event_id") or ""),
            type=int(data.get("type") or 0),
        )


@dataclass
class WorkflowEventInterrupt:
    """The workflow stopped and waits to be resumed."""

    interrupt_data: WorkflowEventInterruptData | None = None
    node_title: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowEventInterrupt":
        raw = data.get("interrupt_data")
        return cls(
            interrupt_data=WorkflowEventInterruptData.from_dict(raw) if isinstance(raw, dict) else None,
            node_title=str(data.get("node_title") or ""),
        )


@dataclass
class WorkflowEventError:
    """An error reported during a workflow run."""

    error_code: int = 0
    error_message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowEventError":
        return cls(
            error_code=int(data.get("error_code") or 0),
            error_message=str(data.get("error_message") or ""),
        )


@dataclass
class WorkflowEventDebugURL:
    """Debug page of a finished run."""

    url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowEventDebugURL":
        return cls(url=str(data.get("debug_url") or ""))


@dataclass
class WorkflowEvent:
    """One event of a streamed workflow run."""

    id: int = 0
    event: WorkflowEventType = WorkflowEventType.MESSAGE
    message: WorkflowEventMessage | None = None
    interrupt: WorkflowEventInterrupt | None = None
    error: WorkflowEventError | None = None
    debug_url: WorkflowEventDebugURL | None = None

    def is_done(self) -> bool:
        return self.event == WorkflowEventType.DONE


def parse_workflow_event_error(data: str) -> WorkflowEventError:
    """Decode the JSON payload of an error event."""
    return WorkflowEventError.from_dict(_load_object(data))


def parse_workflow_event_interrupt(data: str) -> WorkflowEventInterrupt:
    """Decode the JSON payload of an interrupt event."""
    return WorkflowEventInterrupt.from_dict(_load_object(data))


def _parse_id(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def _build_event(event_id: int, event_name: str, data: str) -> WorkflowEvent:
    try:
        kind = WorkflowEventType(event_name)
    except ValueError:
        kind = WorkflowEventType.MESSAGE
    if kind is WorkflowEventType.INTERRUPT:
        return WorkflowEvent(id=event_id, event=kind, interrupt=parse_workflow_event_interrupt(data))
    if kind is WorkflowEventType.ERROR:
        return WorkflowEvent(id=event_id, event=kind, error=parse_workflow_event_error(data))
    if kind is WorkflowEventType.DONE:
        return WorkflowEvent(
            id=event_id, event=kind, debug_url=WorkflowEventDebugURL.from_dict(_load_object(data))
        )
    return WorkflowEvent(
        id=event_id, event=WorkflowEventType.MESSAGE, message=WorkflowEventMessage.from_dict(_load_object(data))
    )


def _next_line(lines: Iterator[str]) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise EOFError("stream ended inside an event") from None


def parse_workflow_event(line: str, lines: Iterator[str]) -> tuple[WorkflowEvent | None, bool]:
    """Decode an event that starts at ``line``, reading its remaining lines from ``lines``."""
    if not line.startswith("id:"):
        return None, False
    event_id = line[3:].strip()
    event_name = _next_line(lines)[6:].strip()
    data = _next_line(lines)[5:].strip()
    event = _build_event(_parse_id(event_id), event_name, data)
    return event, event.is_done()


@dataclass
class RunWorkflowsReq:
    """Parameters for running a published workflow."""

    workflow_id: str
    parameters: dict[str, Any] | None = None
    bot_id: str = ""
    ext: dict[str, str] | None = None
    is_async: bool = False
    app_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"workflow_id": self.workflow_id}
        if self.parameters:
            body["parameters"] = self.parameters
        if self.bot_id:
            body["bot_id"] = self.bot_id
        if self.ext:
            body["ext"] = self.ext
        if self.is_async:
            body["is_async"] = True
        if self.app_id:
            body["app_id"] = self.app_id
        return body


@dataclass
class ResumeRunWorkflowsReq:
    """Parameters for resuming an interrupted workflow run."""

    workflow_id: str
    event_id: str
    resume_data: str
    interrupt_type: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "workflow_id": self.workflow_id,
            "event_id": self.event_id,
            "resume_data": self.resume_data,
            "interrupt_type": self.interrupt_type,
        }


@dataclass
class RunWorkflowsResult:
    """Outcome of a non-streamed workflow run."""

    execute_id: str = ""
    data: str = ""
    debug_url: str = ""
    token: int = 0
    cost: str = ""
    http_response: HTTPResponse | None = field(default=None, compare=False, repr=False)

    @property
    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None, http_response: HTTPResponse | None = None
    ) -> "RunWorkflowsResult":
        data = data or {}
        return cls(
            execute_id=str(data.get("execute_id") or ""),
            data=str(data.get("data") or ""),
            debug_url=str(data.get("debug_url") or ""),
            token=int(data.get("token") or 0),
            cost=str(data.get("cost") or ""),
            http_response=http_response,
        )


class WorkflowRuns:
    """Workflow run operations of the API."""

    def __init__(self, core: Core) -> None:
        self._core = core
        self.histories = WorkflowRunsHistories(core)

    def create(self, req: RunWorkflowsReq) -> RunWorkflowsResult:
        """Run a workflow and wait for its result."""
        result = self._core.request("POST", _RUN_PATH, body=req)
        body = result.body if isinstance(result.body, dict) else {}
        return RunWorkflowsResult.from_dict(body, result.http_response)

    def _open_stream(self, path: str, req: Any) -> Stream[WorkflowEvent]:
        response = self._core.stream_request("POST", path, body=req)
        return Stream(
            response,
            parse_workflow_event,
            HTTPResponse(response.status_code, response.headers),
        )

    def stream(self, req: RunWorkflowsReq) -> Stream[WorkflowEvent]:
        """Run a workflow and stream its events."""
        return self._open_stream(_STREAM_RUN_PATH, req)

    def resume(self, req: ResumeRunWorkflowsReq) -> Stream[WorkflowEvent]:
        """Resume an interrupted run and stream its events."""
        return self._open_stream(_STREAM_RESUME_PATH, req)