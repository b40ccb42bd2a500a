"""Shared fixtures for the test suite."""

import logging
from pathlib import Path

import pytest

VALID_INFO = """name = MyMod
version = 1.0.0
displayName = My Mod
description = A small test mod
author = Ducky
"""

ENV_VARS = (
    "STEAM_APP_ID",
    "DUCKY_STEAM_BACKEND",
    "NUGET_API_KEY",
    "NUGET_SERVER",
    "NUGET_VERBOSE",
)


def write_mod(
    root: Path,
    info: str | None = VALID_INFO,
    files: dict[str, str | bytes] | None = None,
) -> Path:
    """Create a mod directory with an info.ini and extra files."""
    root.mkdir(parents=True, exist_ok=True)

    if info is not None:
        (root / "info.ini").write_text(info, encoding="utf-8")

    for relative, content in (files or {}).items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")

    return root


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host configuration out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging configuration done by the CLI and the worker."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def make_mod(tmp_path: Path):
    """Factory for mod directories under tmp_path."""

    def _make(
        info: str | None = VALID_INFO,
        files: dict[str, str | bytes] | None = None,
        name: str = "MyMod",
    ) -> Path:
        return write_mod(tmp_path / name, info, files)

    return _make


@pytest.fixture
def steam_mod(make_mod):
    """A mod directory that passes every Steam check."""
    return make_mod(
        files={
            "MyMod.dll": b"MZ",
            "preview.png": b"\x89PNG",
            "description/en.md": "# English Title\n\nHello **world**",
            "description/zh.md": "# 中文标题\n\n你好",
        }
    )


class FakeBackend:
    """In-memory Workshop backend that records every call."""

    def __init__(self, item_id: int = 12345, fail_update: Exception | None = None):
        self.item_id = item_id
        self.fail_update = fail_update
        self.app_ids: list[int] = []
        self.created: list[int] = []
        self.updates: list[tuple[int, dict]] = []
        self.shut_down = False

    def __call__(self, app_id: int) -> "FakeBackend":
        self.app_ids.append(app_id)
        return self

    def create_item(self, app_id: int) -> int:
        self.created.append(app_id)
        return self.item_id

    def update_item(self, app_id, item_id, details, on_progress) -> None:
        if self.fail_update is not None:
            raise self.fail_update
        self.updates.append((item_id, dict(details)))
        if on_progress is not None:
            on_progress(50, 100)
            on_progress(100, 100)

    def shutdown(self) -> None:
        self.shut_down = True


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Backend instance that doubles as its own factory."""
    return FakeBackend()
