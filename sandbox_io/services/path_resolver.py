# sandbox_io/services/path_resolver.py
from __future__ import annotations

import logging
import os
import threading
from pathlib import Path, PurePath
from typing import List, Optional, Union

from platformdirs import user_documents_dir

from sandbox_io.config import Settings
from sandbox_io.errors import NoSaveDataLocation, ResolutionError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class PathResolver:
    """
    Turns raw path input into canonical absolute paths and owns the two
    sandbox roots.

    Canonical paths are absolute, symlink-resolved and OS-native, without a
    trailing separator. Existence is never required. Both roots are resolved
    at most once per resolver and cached under a single lock; a failed
    save-data discovery is not cached.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._lock = threading.Lock()
        self._game_root: Optional[Path] = None
        self._save_data_root: Optional[Path] = None

    # ---------- Canonical form ----------

    def absolutize(self, raw: PathLike) -> Path:
        # a configured game root replaces the cwd as the anchor for relative input
        anchor = self.game_root() if self.settings.GAME_ROOT is not None else None
        return self._absolutize(raw, anchor)

    def _absolutize(self, raw: PathLike, anchor: Optional[Path]) -> Path:
        text = self._to_text(raw)
        path = Path(text)
        try:
            if not path.is_absolute():
                # naked names ("file.txt") are anchored like ./ and ../ forms
                path = (anchor if anchor is not None else Path.cwd()) / path
            return path.resolve()
        except (OSError, ValueError, RuntimeError) as exc:
            raise ResolutionError(f"Could not resolve path {text!r}: {exc}") from exc

    def display(self, path: Path, directory: bool = False) -> str:
        text = path.as_posix()
        if directory and not text.endswith("/"):
            text += "/"
        return text

    def relativize(self, base: Path, target: Path) -> Optional[str]:
        """
        Relative path from `base` to `target`, with forward slashes.

        Ancestors come back as `..` chains, descendants as a plain relative
        path, the same path as "". Returns None when the two share no common
        ancestor (e.g. different drives).
        """
        try:
            rel = os.path.relpath(target, base)
        except ValueError:
            return None
        rel = PurePath(rel).as_posix()
        return "" if rel == "." else rel

    @staticmethod
    def _to_text(raw: PathLike) -> str:
        try:
            text = os.fspath(raw)
            if isinstance(text, bytes):
                text = os.fsdecode(text)
        except (TypeError, UnicodeDecodeError) as exc:
            raise ResolutionError(f"Unsupported path value {raw!r}: {exc}") from exc
        if not text:
            raise ResolutionError("Path is empty")
        if "\x00" in text:
            raise ResolutionError("Path contains a NUL byte")
        # platform-foreign separators
        return text.replace("\\", "/")

    # ---------- Roots ----------

    def game_root(self) -> Path:
        with self._lock:
            return self._game_root_locked()

    def resolve_save_data_root(self) -> Path:
        with self._lock:
            if self._save_data_root is not None:
                return self._save_data_root

            game_root = self._game_root_locked()
            for raw_candidate in self._save_data_candidates(game_root):
                candidate = self._absolutize(raw_candidate, game_root)
                if self._is_save_data_location_valid(candidate):
                    self._save_data_root = candidate
                    logger.info("save data directory: %s", self.display(self._save_data_root))
                    return self._save_data_root
                logger.debug("rejected save data candidate %s", candidate)

            raise NoSaveDataLocation("Could not find a valid save data location")

    def _game_root_locked(self) -> Path:
        if self._game_root is None:
            configured = self.settings.GAME_ROOT
            # the root itself is anchored at the cwd
            self._game_root = self._absolutize(configured if configured is not None else ".", None)
            logger.info("game directory: %s", self.display(self._game_root))
        return self._game_root

    def _save_data_candidates(self, game_root: Path) -> List[Path]:
        return [
            # Windows user documents storage
            self._documents_dir() / self.settings.SAVE_DATA_SUBPATH,
            # Linux via Steam's Proton wrapper
            game_root / self.settings.COMPAT_SAVE_DATA_PATH,
            # Installation directory fallback
            game_root / self.settings.FALLBACK_SAVE_DATA_PATH,
        ]

    def _documents_dir(self) -> Path:
        if self.settings.DOCUMENTS_DIR is not None:
            return Path(self.settings.DOCUMENTS_DIR)
        try:
            Path.home()
        except (RuntimeError, KeyError) as exc:
            raise NoSaveDataLocation(
                "Couldn't retrieve a valid home directory path from the operating system"
            ) from exc
        return Path(user_documents_dir())

    def _is_save_data_location_valid(self, candidate: Path) -> bool:
        return os.path.exists(candidate / self.settings.MARKER_FILE_NAME)
