"""HTTP core: sending requests and turning responses into results or errors."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, BinaryIO, Mapping

import httpx

from .logger import get_logger
from .user_agent import apply_user_agent

LOG_ID_HEADER = "X-Tt-Logid"
DEFAULT_TIMEOUT = 5.0


class HTTPResponse:
    """Status and headers of a received response."""

    def __init__(self, status_code: int, headers: Mapping[str, str] | None = None) -> None:
        self.status_code = status_code
        self.headers = httpx.Headers(headers or {})

    def log_id(self) -> str:
        """Return the server's log id, or an empty string."""
        return self.headers.get(LOG_ID_HEADER, "")


class CozeError(Exception):
    """The API answered with a non-zero business code."""

    def __init__(self, code: int, message: str, log_id: str = "") -> None:
        super().__init__(f"code={code}, message={message}, logid={log_id}")
        self.code = code
        self.message = message
        self.log_id = log_id


class AuthError(Exception):
    """The API answered with a non-200 status carrying an error document."""

    def __init__(self, code: str, error_message: str, status_code: int, log_id: str = "") -> None:
        super().__init__(
            f"status_code={status_code}, code={code}, message={error_message}, logid={log_id}"
        )
        self.code = code
        self.error_message = error_message
        self.status_code = status_code
        self.log_id = log_id


@dataclass
class ApiResponse:
    """A decoded API response: business code, message, data and the whole body."""

    code: int = 0
    msg: str = ""
    data: Any = None
    body: Any = None
    http_response: HTTPResponse | None = None

    @property
    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""


def _body_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def check_http_response(response: httpx.Response) -> None:
    """Raise if ``response`` does not have status 200."""
    if response.status_code == httpx.codes.OK:
        return
    log_id = response.headers.get(LOG_ID_HEADER, "")
    raw = response.read()
    text = _body_text(raw)
    try:
        info = json.loads(raw)
    except ValueError:
        info = ...
    if info is None:
        info = {}
    if not isinstance(info, dict):
        get_logger().error("unmarshal response body: %s", text)
        raise CozeError(response.status_code, f"{text} log_id: {log_id}", log_id)
    raise AuthError(
        code=str(info.get("error_code") or ""),
        error_message=str(info.get("error_message") or ""),
        status_code=response.status_code,
        log_id=log_id,
    )


def _ensure_success(result: ApiResponse, raw: bytes) -> ApiResponse:
    if result.code != 0:
        get_logger().warn("request unsuccessful: %s, log_id:%s", _body_text(raw), result.log_id)
        raise CozeError(result.code, result.msg, result.log_id)
    return result


def parse_response(response: httpx.Response) -> ApiResponse:
    """Decode a JSON API response, raising on HTTP or business errors."""
    check_http_response(response)
    raw = response.read()
    http_response = HTTPResponse(response.status_code, response.headers)
    try:
        body = json.loads(raw)
    except ValueError:
        get_logger().error("unmarshal response body: %s", _body_text(raw))
        raise
    if not isinstance(body, dict):
        return ApiResponse(body=body, http_response=http_response)
    result = ApiResponse(
        code=int(body.get("code") or 0),
        msg=str(body.get("msg") or ""),
        data=body.get("data"),
        body=body,
        http_response=http_response,
    )
    return _ensure_success(result, raw)


def _jsonable(body: Any) -> Any:
    to_dict = getattr(body, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return dataclasses.asdict(body)
    return body


def _merge_headers(base: Mapping[str, str], extra: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(base)
    for key, value in (extra or {}).items():
        for existing in [k for k in merged if k.lower() == key.lower()]:
            del merged[existing]
        merged[key] = value
    return merged


class Core:
    """Sends requests to the API below ``base_url``."""

    def __init__(self, http_client: httpx.Client | None = None, base_url: str = "") -> None:
        self.http_client = http_client if http_client is not None else httpx.Client(timeout=DEFAULT_TIMEOUT)
        self.base_url = base_url

    def _send(
        self,
        method: str,
        path: str,
        body: Any,
        params: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
        stream: bool,
    ) -> httpx.Response:
        content = None
        if body is not None:
            content = json.dumps(_jsonable(body), ensure_ascii=False).encode("utf-8")
        merged = _merge_headers({"Content-Type": "application/json"}, headers)
        request = self.http_client.build_request(
            method,
            f"{self.base_url}{path}",
            content=content,
            params=params,
            headers=apply_user_agent(merged),
        )
        response = self.http_client.send(request, stream=stream)
        try:
            check_http_response(response)
        except Exception:
            response.close()
            raise
        return response

    def raw_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a JSON request and return the response once its status is 200."""
        return self._send(method, path, body, params, headers, stream=False)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        """Send a JSON request and decode the JSON answer."""
        return parse_response(self.raw_request(method, path, body, params, headers))

    def stream_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request whose answer is an event stream; the body is left unread."""
        response = self._send(method, path, body, params, headers, stream=True)
        if "application/json" in response.headers.get("Content-Type", ""):
            try:
                parse_response(response)
            except Exception:
                response.close()
                raise
        return response

    def upload_file(
        self,
        path: str,
        file: BinaryIO | bytes,
        file_name: str,
        fields: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        """Post ``file`` as multipart form data under the field name ``file``."""
        content = file.read() if hasattr(file, "read") else bytes(file)
        request = self.http_client.build_request(
            "POST",
            f"{self.base_url}{path}",
            files={"file": (file_name, content)},
            data=dict(fields) if fields else None,
            params=params,
            headers=apply_user_agent(dict(headers or {})),
        )
        response = self.http_client.send(request)
        return parse_response(response)