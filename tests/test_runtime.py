"""Tests for the local/embedded mode switch."""

from __future__ import annotations

import pytest

from embedpack.runtime import LOCAL_ENV_VAR, ModeSwitch
from embedpack.storage import InvalidArgumentError


def test_defaults_to_embedded():
    mode = ModeSwitch()
    assert mode.local is False
    assert mode.snapshot().root == ""


def test_set_local_and_back():
    mode = ModeSwitch()
    mode.set_local("/srv/assets")
    snap = mode.snapshot()
    assert snap.local is True
    assert snap.root == "/srv/assets"

    mode.set_local("")
    assert mode.local is False


def test_rejects_non_string_root():
    with pytest.raises(InvalidArgumentError):
        ModeSwitch().set_local(None)  # type: ignore[arg-type]


def test_instances_are_independent():
    a, b = ModeSwitch(), ModeSwitch()
    a.set_local("/tmp")
    assert b.local is False


class TestFromEnv:
    def test_unset_uses_default(self):
        assert ModeSwitch.from_env().local is False
        assert ModeSwitch.from_env("/srv").root == "/srv"

    def test_set_overrides_default(self, monkeypatch):
        monkeypatch.setenv(LOCAL_ENV_VAR, "/dev/assets")
        assert ModeSwitch.from_env().root == "/dev/assets"
        assert ModeSwitch.from_env("/srv").root == "/dev/assets"

    def test_empty_forces_embedded(self, monkeypatch):
        monkeypatch.setenv(LOCAL_ENV_VAR, "")
        assert ModeSwitch.from_env("/srv").local is False

    def test_custom_variable(self, monkeypatch):
        monkeypatch.setenv("MYAPP_ASSETS", "/other")
        assert ModeSwitch.from_env(var="MYAPP_ASSETS").root == "/other"
