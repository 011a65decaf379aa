"""Tests for environment-driven defaults."""

from __future__ import annotations

import importlib
from collections.abc import Iterator

import pytest

import streamstack.config


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """Yield monkeypatch, then reload the module with a clean environment."""
    yield monkeypatch
    monkeypatch.delenv("STREAMSTACK_BLOCK_SIZE", raising=False)
    monkeypatch.delenv("STREAMSTACK_ENCODING", raising=False)
    importlib.reload(streamstack.config)


class TestDefaults:
    """Tests for the defaults without overrides."""

    def test_values(self) -> None:
        """8 KiB blocks, UTF-8, zlib's default level."""
        assert streamstack.config.DEFAULT_BLOCK_SIZE == 8192
        assert streamstack.config.DEFAULT_ENCODING == "utf-8"
        assert streamstack.config.DEFAULT_COMPRESSION_LEVEL == -1


class TestOverrides:
    """Tests for environment overrides."""

    def test_block_size_override(self, reload_config: pytest.MonkeyPatch) -> None:
        """A positive integer replaces the default block size."""
        reload_config.setenv("STREAMSTACK_BLOCK_SIZE", "65536")
        importlib.reload(streamstack.config)
        assert streamstack.config.DEFAULT_BLOCK_SIZE == 65536

    @pytest.mark.parametrize("value", ["0", "-5", "lots", ""])
    def test_invalid_block_size_fails_at_import(
        self, reload_config: pytest.MonkeyPatch, value: str
    ) -> None:
        """A bad value is reported when the module loads."""
        reload_config.setenv("STREAMSTACK_BLOCK_SIZE", value)
        with pytest.raises(ValueError, match="STREAMSTACK_BLOCK_SIZE"):
            importlib.reload(streamstack.config)

    def test_encoding_override(self, reload_config: pytest.MonkeyPatch) -> None:
        """The default encoding can be replaced."""
        reload_config.setenv("STREAMSTACK_ENCODING", "Latin-1")
        importlib.reload(streamstack.config)
        assert streamstack.config.DEFAULT_ENCODING == "latin-1"

    def test_unknown_encoding_fails_at_import(self, reload_config: pytest.MonkeyPatch) -> None:
        """An unknown codec is reported when the module loads."""
        reload_config.setenv("STREAMSTACK_ENCODING", "no-such-codec")
        with pytest.raises(ValueError, match="STREAMSTACK_ENCODING"):
            importlib.reload(streamstack.config)
