"""Shared pytest fixtures and test helpers for dockstream tests."""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from dockstream.managers.config_manager import ConnectionConfig
from dockstream.managers.transport import StreamHandle


class RecordingLog:
    """Stand-in for the injected loguru logger that keeps every call."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def _record(self, level: str):
        def log(message: str, *args: Any, **kwargs: Any) -> None:
            self.records.append((level, message))

        return log

    def __getattr__(self, level: str):
        if level in ("debug", "info", "warning", "error", "success"):
            return self._record(level)
        raise AttributeError(level)

    def messages(self, level: str) -> List[str]:
        return [message for lvl, message in self.records if lvl == level]


class FakeTransport:
    """Records every daemon call and replays canned stream chunks."""

    def __init__(self, chunks: Optional[Iterable[Any]] = None, error: Optional[Exception] = None) -> None:
        self.chunks = list(chunks or [])
        self.error = error
        self.calls: List[Tuple[Any, ...]] = []
        self.handles: List[StreamHandle] = []

    def _open(self, *call: Any) -> StreamHandle:
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        handle = StreamHandle(iter(self.chunks), release=lambda: None)
        self.handles.append(handle)
        return handle

    def open_build_stream(self, build_context: str, tag: str) -> StreamHandle:
        return self._open("build", build_context, tag)

    def open_push_stream(self, repository: str, tag: str) -> StreamHandle:
        return self._open("push", repository, tag)

    def tag_image(self, image_id: str, repository: str, tag: str, force: bool = True) -> None:
        self.calls.append(("tag", image_id, repository, tag, force))
        if self.error is not None:
            raise self.error


def frames(*items: Dict[str, Any]) -> List[bytes]:
    """Encode daemon frames the way the daemon streams them, one JSON object per line."""
    return [(json.dumps(item) + "\r\n").encode("utf-8") for item in items]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DOCKER_URL",
        "DOCKER_HOST",
        "DOCKER_TIMEOUT",
        "DOCKER_REGISTRY",
        "DOCKER_USERNAME",
        "DOCKER_PASSWORD",
        "DOCKER_EMAIL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log() -> RecordingLog:
    return RecordingLog()


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(url="tcp://daemon:2375")
