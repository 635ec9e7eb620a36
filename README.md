# cozeclient

A small Python client for the Coze HTTP API. It covers uploading and
retrieving files, looking up the current user, duplicating templates,
running workflows (synchronously or as a stream of events), resuming
interrupted workflow runs, and reading workflow run histories.

## Installation

```
pip install cozeclient
```

To run the test suite:

```
pip install "cozeclient[test]"
pytest
```

## Basics

Every API group is built on a `cozeclient.request.Core`, which wraps an
`httpx.Client` and a base URL. If no client is given, `Core` creates an
`httpx.Client` with a 5 second timeout. Authentication is passed as an
ordinary HTTP header on the client you supply.

```python
import httpx

from cozeclient.request import Core
from cozeclient.users import Users

http = httpx.Client(headers={"Authorization": "Bearer token"}, timeout=5.0)
core = Core(http, "https://api.coze.com")

me = Users(core).me()
print(me.user_name, me.nick_name, me.log_id)
```

Every request carries a `User-Agent` and an `X-Coze-Client-User-Agent`
header (see `cozeclient.user_agent`). Results expose the server's log id
(the `X-Tt-Logid` response header) as `log_id`.

When a call fails, `Core` raises:

- `cozeclient.request.CozeError` when the API answers with a non-zero
  `code`; the error has `code`, `message` and `log_id`. It is also raised
  when the HTTP status is not 200 and the body is not a JSON object; `code`
  is then the HTTP status.
- `cozeclient.request.AuthError` when the HTTP status is not 200 and the
  body is a JSON object; the error has `code` (the body's `error_code`),
  `error_message`, `status_code` and `log_id`.

Errors from `httpx` itself (network failures, timeouts) are not wrapped.

## Files

```python
from cozeclient.files import Files, UploadFile

files = Files(core)
with open("report.txt", "rb") as fh:
    info = files.upload(UploadFile(fh, "report.txt"))
print(info.id, info.bytes, info.file_name)

again = files.retrieve(info.id)
```

`UploadFile` also accepts raw `bytes`.

## Templates

```python
from cozeclient.templates import Templates

result = Templates(core).duplicate("template-id", workspace_id="ws-id", name="My copy")
print(result.entity_id, result.entity_type)
```

## Workflows

Run a workflow and wait for its result:

```python
from cozeclient.workflow_runs import RunWorkflowsReq, WorkflowRuns

runs = WorkflowRuns(core)
result = runs.create(RunWorkflowsReq(workflow_id="workflow-id", parameters={"q": "hi"}))
print(result.execute_id, result.data, result.token, result.cost)
```

Or stream its events. A `cozeclient.stream_reader.Stream` is iterable and
works as a context manager that closes the response. `recv()` returns the
next event, or `None` once the response body is exhausted; iteration ends
at the same point. `is_finished()` tells whether the last event read was
`Done`.

```python
from cozeclient.workflow_runs import WorkflowEventType

with runs.stream(RunWorkflowsReq(workflow_id="workflow-id")) as stream:
    for event in stream:
        if event.event is WorkflowEventType.MESSAGE:
            print(event.message.content, end="")
        elif event.event is WorkflowEventType.INTERRUPT:
            print("interrupted:", event.interrupt.interrupt_data.event_id)
        elif event.event is WorkflowEventType.ERROR:
            print("error:", event.error.error_code, event.error.error_message)
        elif event.is_done():
            print("debug page:", event.debug_url.url)
```

An interrupted run is continued with
`runs.resume(ResumeRunWorkflowsReq(workflow_id, event_id, resume_data, interrupt_type))`,
which returns another stream. The payload decoders
`parse_workflow_event_error` and `parse_workflow_event_interrupt` are
available on their own.

Past runs can be looked up, either through `runs.histories` or directly:

```python
from cozeclient.workflow_runs_histories import WorkflowRunsHistories

histories = WorkflowRunsHistories(core).retrieve("workflow-id", "execute-id")
for entry in histories.histories:
    print(entry.execute_status, entry.run_mode, entry.output)
```

## Logging

The package logs through `cozeclient.logger`. By default records at level
`INFO` and above are written, timestamped, to standard error. The level and
the sink can be changed; a sink is any object with a
`log(level, message, *args)` method.

```python
from cozeclient.logger import LogLevel, set_level

set_level(LogLevel.DEBUG)
```

## Helpers

`cozeclient.utils` has `generate_random_string`, `bytes_to_hex` and
`must_to_json` (compact JSON, or `"{}"` for objects that cannot be
serialised).

## What it does not do

There is no single top-level client object and no authentication flow: the
package does not obtain or refresh tokens, so credentials must be set on
the `httpx.Client` you pass to `Core`. It does not cover chat,
conversations or workspace listing; only the API groups described above
are available.