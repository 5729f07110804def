# tests/conftest.py
import os
from pathlib import Path

import pytest

from sandbox_io.config import Settings
from sandbox_io.di import build_container


@pytest.fixture
def symlink():
    def make(link: Path, target: Path, target_is_directory: bool = False):
        try:
            os.symlink(target, link, target_is_directory=target_is_directory)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks are not available on this platform")
    return make


@pytest.fixture
def game_root(tmp_path: Path, monkeypatch) -> Path:
    root = tmp_path / "game"
    root.mkdir()
    monkeypatch.chdir(root)
    return root.resolve()


@pytest.fixture
def documents(tmp_path: Path) -> Path:
    docs = tmp_path / "docs"
    docs.mkdir()
    return docs.resolve()


@pytest.fixture
def save_root(documents: Path) -> Path:
    root = documents / "My Games" / "Into The Breach"
    root.mkdir(parents=True)
    (root / "io_test.txt").write_text("")
    return root


@pytest.fixture
def settings(game_root: Path, documents: Path) -> Settings:
    return Settings(GAME_ROOT=game_root, DOCUMENTS_DIR=documents)


@pytest.fixture
def container(settings: Settings, save_root: Path):
    return build_container(settings)


@pytest.fixture
def sandbox(container):
    return container.sandbox
