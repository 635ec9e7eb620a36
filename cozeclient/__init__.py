"""Client library for the Coze HTTP API: files, users, templates and workflow runs."""

__version__ = "0.1.0"

__all__ = [
    "files",
    "logger",
    "request",
    "stream_reader",
    "templates",
    "user_agent",
    "users",
    "utils",
    "workflow_runs",
    "workflow_runs_histories",
]