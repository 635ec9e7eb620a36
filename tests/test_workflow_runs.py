import json

import httpx
import pytest

from cozeclient.request import AuthError, Core
from cozeclient.workflow_runs import (
    ResumeRunWorkflowsReq,
    RunWorkflowsReq,
    WorkflowEventType,
    WorkflowRuns,
    parse_workflow_event,
    parse_workflow_event_error,
    parse_workflow_event_interrupt,
)

BASE_URL = "https://api.example.com"
LOG_HEADERS = {"X-Tt-Logid": "test_log_id"}


def _runs(handler, seen=None):
    def wrapped(request):
        if seen is not None:
            seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(wrapped))
    return WorkflowRuns(Core(client, BASE_URL))


def _stream_response(text):
    return lambda request: httpx.Response(200, text=text, headers=LOG_HEADERS)


def test_create_success():
    seen = []

    def handler(request):
        return httpx.Response(
            200,
            json={
                "code": 0,
                "msg": "",
                "execute_id": "exec1",
                "data": '{"result": "success"}',
                "debug_url": "https://debug.example.com",
                "token": 100,
                "cost": "0.1",
            },
            headers=LOG_HEADERS,
        )

    runs = _runs(handler, seen)
    result = runs.create(
        RunWorkflowsReq(
            workflow_id="workflow1",
            parameters={"param1": "value1"},
            bot_id="bot1",
            is_async=True,
            app_id="app1",
        )
    )
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/v1/workflow/run"
    assert json.loads(seen[0].content) == {
        "workflow_id": "workflow1",
        "parameters": {"param1": "value1"},
        "bot_id": "bot1",
        "is_async": True,
        "app_id": "app1",
    }
    assert result.log_id == "test_log_id"
    assert result.execute_id == "exec1"
    assert result.data == '{"result": "success"}'
    assert result.debug_url == "https://debug.example.com"
    assert result.token == 100
    assert result.cost == "0.1"


def test_request_omits_empty_fields():
    assert RunWorkflowsReq(workflow_id="w").to_dict() == {"workflow_id": "w"}


def test_stream_success():
    seen = []
    body = (
        "id:0\nevent:Message\n"
        'data:{"content":"Hello","node_title":"Start","node_seq_id":"0","node_is_finish":false}\n\n'
        "id:1\nevent:Message\n"
        'data:{"content":"World","node_title":"End","node_seq_id":"1","node_is_finish":true}\n\n'
        "id:2\nevent:Done\n"
        'data:{"debug_url":"https://www.coze.cn/work_flow?***"}\n'
    )
    runs = _runs(_stream_response(body), seen)
    with runs.stream(RunWorkflowsReq(workflow_id="workflow1", parameters={"param1": "value1"})) as reader:
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/v1/workflow/stream_run"

        event = reader.recv()
        assert event.id == 0
        assert event.event == WorkflowEventType.MESSAGE
        assert event.message.content == "Hello"
        assert event.message.node_title == "Start"
        assert event.message.node_seq_id == "0"
        assert event.message.node_is_finish is False

        event = reader.recv()
        assert event.id == 1
        assert event.event == WorkflowEventType.MESSAGE
        assert event.message.content == "World"
        assert event.message.node_title == "End"
        assert event.message.node_seq_id == "1"
        assert event.message.node_is_finish is True

        event = reader.recv()
        assert event.id == 2
        assert event.event == WorkflowEventType.DONE
        assert event.debug_url.url == "https://www.coze.cn/work_flow?***"
        assert event.is_done()
        assert reader.is_finished()
        assert reader.recv() is None
        assert reader.response().log_id() == "test_log_id"


def test_resume_success():
    seen = []
    body = (
        "id:0\nevent:Message\n"
        'data:{"content":"Resumed","node_title":"Resume","node_seq_id":"0","node_is_finish":true}\n\n'
        "id:1\nevent:Done\n"
        'data:{"debug_url":"https://www.coze.cn/work_flow?***"}\n'
    )
    runs = _runs(_stream_response(body), seen)
    req = ResumeRunWorkflowsReq(
        workflow_id="workflow1", event_id="event1", resume_data="data1", interrupt_type=1
    )
    with runs.resume(req) as reader:
        events = list(reader)
    assert seen[0].url.path == "/v1/workflow/stream_resume"
    assert json.loads(seen[0].content) == {
        "workflow_id": "workflow1",
        "event_id": "event1",
        "resume_data": "data1",
        "interrupt_type": 1,
    }
    assert len(events) == 2
    assert events[0].id == 0
    assert events[0].message.content == "Resumed"
    assert events[0].message.node_title == "Resume"
    assert events[0].message.node_is_finish is True
    assert events[1].id == 1
    assert events[1].is_done()
    assert events[1].debug_url.url == "https://www.coze.cn/work_flow?***"


def test_stream_error_event():
    body = 'id:0\nevent:Error\ndata:{"error_code":400,"error_message":"Bad Request"}\n'
    with _runs(_stream_response(body)).stream(RunWorkflowsReq(workflow_id="workflow1")) as reader:
        event = reader.recv()
    assert event.event == WorkflowEventType.ERROR
    assert event.error.error_code == 400
    assert event.error.error_message == "Bad Request"


def test_stream_interrupt_event():
    body = (
        "id:0\nevent:Interrupt\n"
        'data:{"interrupt_data":{"event_id":"event1","type":1},"node_title":"Question"}\n'
    )
    with _runs(_stream_response(body)).stream(RunWorkflowsReq(workflow_id="workflow1")) as reader:
        event = reader.recv()
    assert event.event == WorkflowEventType.INTERRUPT
    assert event.interrupt.interrupt_data.event_id == "event1"
    assert event.interrupt.interrupt_data.type == 1
    assert event.interrupt.node_title == "Question"


def test_stream_http_error_raises():
    def handler(request):
        return httpx.Response(
            400, json={"error_code": "bad", "error_message": "nope"}, headers=LOG_HEADERS
        )

    with pytest.raises(AuthError) as info:
        _runs(handler).stream(RunWorkflowsReq(workflow_id="workflow1"))
    assert info.value.status_code == 400
    assert info.value.error_message == "nope"


def test_parse_workflow_event_error():
    err = parse_workflow_event_error('{"error_code":400,"error_message":"Bad Request"}')
    assert err.error_code == 400
    assert err.error_message == "Bad Request"


def test_parse_workflow_event_interrupt():
    interrupt = parse_workflow_event_interrupt(
        '{"interrupt_data":{"event_id":"event1","type":1},"node_title":"Question"}'
    )
    assert interrupt.interrupt_data.event_id == "event1"
    assert interrupt.interrupt_data.type == 1
    assert interrupt.node_title == "Question"


@pytest.mark.parametrize("parse", [parse_workflow_event_error, parse_workflow_event_interrupt])
def test_invalid_json_raises(parse):
    with pytest.raises(ValueError):
        parse("invalid json")


def test_non_id_line_is_skipped():
    assert parse_workflow_event("retry:100", iter([])) == (None, False)


def test_unknown_event_parsed_as_message():
    event, done = parse_workflow_event("id:5", iter(["event:Other", 'data:{"content":"x"}']))
    assert done is False
    assert event.id == 5
    assert event.event == WorkflowEventType.MESSAGE
    assert event.message.content == "x"


def test_bad_id_becomes_zero():
    event, _ = parse_workflow_event("id:abc", iter(["event:Message", 'data:{"content":"y"}']))
    assert event.id == 0


def test_truncated_event_raises():
    with pytest.raises(EOFError):
        parse_workflow_event("id:0", iter(["event:Message"]))


def test_histories_attached():
    runs = _runs(_stream_response(""))
    assert runs.histories.__class__.__name__ == "WorkflowRunsHistories"