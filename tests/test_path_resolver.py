# tests/test_path_resolver.py
import os
import threading
from pathlib import Path

import pytest

from sandbox_io.config import Settings
from sandbox_io.errors import NoSaveDataLocation, ResolutionError
from sandbox_io.services import path_resolver
from sandbox_io.services.path_resolver import PathResolver


def test_naked_name_is_anchored_at_game_root(game_root: Path, settings: Settings):
    r = PathResolver(settings)
    assert r.absolutize("file.txt") == game_root / "file.txt"
    assert r.absolutize("./file.txt") == game_root / "file.txt"
    assert r.absolutize("sub/../file.txt") == game_root / "file.txt"


def test_absolutize_does_not_require_existence(game_root: Path, settings: Settings):
    r = PathResolver(settings)
    p = r.absolutize("missing/dir/file.bin")
    assert p.is_absolute()
    assert p == game_root / "missing" / "dir" / "file.bin"
    assert not p.exists()


def test_backslashes_are_separators(game_root: Path, settings: Settings):
    r = PathResolver(settings)
    assert r.absolutize("scripts\\mods\\init.lua") == game_root / "scripts" / "mods" / "init.lua"


def test_symlinks_are_resolved(tmp_path: Path, game_root: Path, settings: Settings, symlink):
    outside = tmp_path / "outside"
    outside.mkdir()
    symlink(game_root / "link", outside, target_is_directory=True)

    r = PathResolver(settings)
    assert r.absolutize("link/x.txt") == outside.resolve() / "x.txt"


@pytest.mark.parametrize("raw", ["", "bad\x00name"])
def test_unresolvable_input_raises(settings: Settings, raw: str):
    with pytest.raises(ResolutionError):
        PathResolver(settings).absolutize(raw)


def test_display_marks_directories(game_root: Path, settings: Settings):
    r = PathResolver(settings)
    p = r.absolutize("asd")
    assert r.display(p) == game_root.as_posix() + "/asd"
    assert r.display(p, directory=True) == game_root.as_posix() + "/asd/"
    assert not str(p).endswith(os.sep)


def test_relativize(game_root: Path, settings: Settings):
    r = PathResolver(settings)
    some = r.absolutize("some")
    some_path = r.absolutize("some/path")
    some_path_test = r.absolutize("some/path/test")

    assert r.relativize(some_path, some_path_test) == "test"
    assert r.relativize(some_path_test, some) == "../.."
    assert r.relativize(some_path, some_path) == ""
    assert r.relativize(some_path, r.absolutize("some/other/x")) == "../other/x"


def test_game_root_is_cached_from_cwd(tmp_path: Path, game_root: Path, monkeypatch):
    r = PathResolver(Settings())
    assert r.game_root() == game_root

    monkeypatch.chdir(tmp_path)
    assert r.game_root() == game_root


# ---------- Save data discovery ----------

def test_documents_candidate_is_found_and_cached(settings: Settings, save_root: Path):
    r = PathResolver(settings)
    first = r.resolve_save_data_root()
    assert first == save_root

    (save_root / "io_test.txt").unlink()
    assert r.resolve_save_data_root() is first


def test_documents_candidate_wins_over_fallback(game_root: Path, settings: Settings, save_root: Path):
    (game_root / "user").mkdir()
    (game_root / "user" / "io_test.txt").write_text("")
    assert PathResolver(settings).resolve_save_data_root() == save_root


def test_compat_layer_candidate(tmp_path: Path, documents: Path, monkeypatch):
    game = tmp_path / "library" / "steamapps" / "common" / "game"
    game.mkdir(parents=True)
    monkeypatch.chdir(game)
    prefix = tmp_path / "library" / "steamapps" / "steamapps" / "compatdata" / "590380" / "pfx"
    prefix.mkdir(parents=True)
    (prefix / "io_test.txt").write_text("")

    r = PathResolver(Settings(DOCUMENTS_DIR=documents))
    assert r.resolve_save_data_root() == prefix.resolve()


def test_fallback_candidate(game_root: Path, settings: Settings):
    (game_root / "user").mkdir()
    (game_root / "user" / "io_test.txt").write_text("")
    assert PathResolver(settings).resolve_save_data_root() == game_root / "user"


def test_no_candidate_raises_and_is_not_cached(game_root: Path, settings: Settings):
    r = PathResolver(settings)
    with pytest.raises(NoSaveDataLocation):
        r.resolve_save_data_root()

    (game_root / "user").mkdir()
    (game_root / "user" / "io_test.txt").write_text("")
    assert r.resolve_save_data_root() == game_root / "user"


def test_platform_documents_dir_is_used(tmp_path: Path, game_root: Path, save_root: Path,
                                        documents: Path, monkeypatch):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    monkeypatch.setattr(path_resolver, "user_documents_dir", lambda: str(documents))
    assert PathResolver(Settings()).resolve_save_data_root() == save_root


def test_missing_home_directory_raises(game_root: Path, monkeypatch):
    def no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", classmethod(no_home))
    with pytest.raises(NoSaveDataLocation):
        PathResolver(Settings()).resolve_save_data_root()


def test_concurrent_first_use_probes_once(settings: Settings, save_root: Path, monkeypatch):
    r = PathResolver(settings)
    probes = []
    original = r._is_save_data_location_valid

    def counting(candidate):
        probes.append(candidate)
        return original(candidate)

    monkeypatch.setattr(r, "_is_save_data_location_valid", counting)

    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(r.resolve_save_data_root())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(probes) == 1
    assert len(results) == 8
    assert all(res is results[0] for res in results)


def test_configured_game_root_anchors_relative_input(tmp_path: Path, game_root: Path,
                                                     settings: Settings, save_root: Path, monkeypatch):
    # cwd inside the save data root must not redirect relative paths there
    monkeypatch.chdir(save_root)
    r = PathResolver(settings)
    assert r.absolutize("file.txt") == game_root / "file.txt"
    assert r.absolutize("mods\\x.lua") == game_root / "mods" / "x.lua"
    assert r.game_root() == game_root


def test_relative_game_root_is_anchored_at_cwd(tmp_path: Path, documents: Path, monkeypatch):
    (tmp_path / "install").mkdir()
    monkeypatch.chdir(tmp_path)
    r = PathResolver(Settings(GAME_ROOT=Path("install"), DOCUMENTS_DIR=documents))
    assert r.game_root() == (tmp_path / "install").resolve()
    assert r.absolutize("a.txt") == (tmp_path / "install").resolve() / "a.txt"
