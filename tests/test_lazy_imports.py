"""Tests for perch.__init__: lazy public exports."""

import importlib
import sys

import pytest

import perch


def _forget(monkeypatch: pytest.MonkeyPatch, *packages: str) -> None:
    """Drop *packages* from sys.modules for the duration of a test."""
    for name in list(sys.modules):
        if any(name == p or name.startswith(f"{p}.") for p in packages):
            monkeypatch.delitem(sys.modules, name)


class TestRegistry:
    @pytest.mark.parametrize("name", perch.__all__)
    def test_name_resolves_from_its_module(self, name: str) -> None:
        module = importlib.import_module(perch._LAZY_IMPORTS[name])
        assert getattr(perch, name) is getattr(module, name)

    def test_registry_matches_all(self) -> None:
        assert set(perch._LAZY_IMPORTS) == set(perch.__all__)

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'navigate'"):
            perch.__getattr__("navigate")


class TestImportCost:
    def test_import_does_not_load_anyio(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _forget(monkeypatch, "perch", "anyio")
        fresh = importlib.import_module("perch")
        assert "anyio" not in sys.modules
        assert "perch.sync" not in sys.modules
        assert fresh.__version__ == perch.__version__

    def test_codec_access_does_not_load_synchronizer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _forget(monkeypatch, "perch", "anyio")
        fresh = importlib.import_module("perch")
        assert fresh.serialize({"sort": "date"}) == "sort=date"
        assert "perch.query.codec" in sys.modules
        assert "perch.sync" not in sys.modules
        assert "anyio" not in sys.modules
