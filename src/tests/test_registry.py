"""Tests for the virtual file registry."""

import os
import re

import pytest

from pic_staging import FiletypeError, NoSuchFileError, VirtualFileRegistry


@pytest.fixture
def registry(tmp_path):
    return VirtualFileRegistry("test-pic", str(tmp_path))


class TestCreate:
    def test_list_empty_before_creation(self, registry) -> None:
        assert registry.list() == set()

    def test_creates_empty_backing_file(self, registry) -> None:
        name = registry.create(".png")
        path = registry.resolve(name)
        assert os.path.isfile(path)
        assert os.path.getsize(path) == 0

    def test_names_are_id_plus_canonical_extension(self, registry) -> None:
        assert registry.create("jpeg") == "1.jpg"
        assert registry.create("image/png") == "2.png"
        assert registry.create(".GIF") == "3.gif"

    def test_backing_path_carries_prefix_and_extension(self, registry, tmp_path) -> None:
        name = registry.create(".jpeg")
        path = registry.resolve(name)
        assert os.path.dirname(path) == str(tmp_path)
        assert re.match(rf"^{re.escape(registry.prefix)}-1-.*\.jpg$", os.path.basename(path))

    def test_every_creation_adds_a_distinct_entry(self, registry) -> None:
        names = [registry.create(".png") for _ in range(17)]
        assert len(set(names)) == 17
        assert registry.list() == set(names)
        assert len(registry) == 17

    def test_unsupported_extension_consumes_nothing(self, registry, tmp_path) -> None:
        with pytest.raises(FiletypeError):
            registry.create(".bmp")
        assert registry.list() == set()
        assert os.listdir(tmp_path) == []
        assert registry.create(".png") == "1.png"


class TestLookup:
    def test_resolve_unknown(self, registry) -> None:
        with pytest.raises(NoSuchFileError):
            registry.resolve("99.jpg")

    def test_get_returns_entry(self, registry) -> None:
        name = registry.create(".gif")
        entry = registry.get(name)
        assert entry.id == 1
        assert entry.extension == ".gif"
        assert entry.name == name

    def test_contains(self, registry) -> None:
        name = registry.create(".png")
        assert name in registry
        assert "2.png" not in registry


class TestRemove:
    def test_removes_entry_and_file(self, registry) -> None:
        name = registry.create(".png")
        path = registry.resolve(name)
        registry.remove(name)
        assert name not in registry.list()
        assert not os.path.exists(path)

    def test_remove_unknown(self, registry) -> None:
        with pytest.raises(NoSuchFileError):
            registry.remove("1.png")

    def test_backing_file_already_gone(self, registry) -> None:
        name = registry.create(".png")
        os.remove(registry.resolve(name))
        registry.remove(name)
        assert name not in registry

    def test_failed_delete_keeps_entry(self, registry, monkeypatch) -> None:
        name = registry.create(".png")

        def locked(path):
            raise PermissionError("file is locked")

        monkeypatch.setattr(os, "remove", locked)
        with pytest.raises(OSError):
            registry.remove(name)
        assert name in registry

    def test_ids_are_not_reused(self, registry) -> None:
        first = registry.create(".png")
        registry.remove(first)
        assert registry.create(".png") == "2.png"
