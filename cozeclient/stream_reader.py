"""Reading server-sent event streams one event at a time."""

from __future__ import annotations

from typing import Callable, Generic, Iterator, Optional, Tuple, TypeVar

import httpx

from .request import HTTPResponse, parse_response

T = TypeVar("T")

Processor = Callable[[str, Iterator[str]], Tuple[Optional[T], bool]]


class Stream(Generic[T]):
    """Events decoded from a streamed response.

    The processor receives each non-empty line together with the line
    iterator, may consume further lines from it, and returns the decoded
    event (or ``None`` to skip) and whether the stream is done.
    """

    def __init__(
        self,
        response: httpx.Response,
        processor: Processor,
        http_response: HTTPResponse | None = None,
    ) -> None:
        self._response = response
        self._processor = processor
        if http_response is None:
            http_response = HTTPResponse(response.status_code, response.headers)
        self._http_response = http_response
        self._lines: Iterator[str] | None = None
        self._finished = False

    def _line_iterator(self) -> Iterator[str]:
        if self._lines is None:
            content_type = self._response.headers.get("Content-Type", "")
            if "application/json" in content_type:
                parse_response(self._response)
                self._lines = iter(())
            else:
                self._lines = self._response.iter_lines()
        return self._lines

    def recv(self) -> T | None:
        """Return the next event, or ``None`` when the stream is exhausted."""
        lines = self._line_iterator()
        for line in lines:
            if not line:
                continue
            event, done = self._processor(line, lines)
            self._finished = done
            if event is not None:
                return event
        self._finished = True
        return None

    def close(self) -> None:
        self._response.close()

    def response(self) -> HTTPResponse:
        return self._http_response

    def is_finished(self) -> bool:
        return self._finished

    def __iter__(self) -> Iterator[T]:
        while (event := self.recv()) is not None:
            yield event

    def __enter__(self) -> "Stream[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()