# sandbox_io/services/sandbox.py
from __future__ import annotations

import logging
from pathlib import Path

from sandbox_io.errors import AccessDenied
from sandbox_io.logging import redact_str
from sandbox_io.services.directory_handle import DirectoryHandle
from sandbox_io.services.file_handle import FileHandle
from sandbox_io.services.path_resolver import PathLike, PathResolver

logger = logging.getLogger(__name__)


class SandboxAuthority:
    """
    Single authority deciding whether a path may be touched.

    A path is whitelisted when its canonical form lies under the game root or
    under the save-data root (segment-wise, so /games2 is not inside /games).
    Every handle is created here, and every operation that derives a new path
    comes back here before any I/O happens.
    """

    def __init__(self, resolver: PathResolver):
        self.resolver = resolver

    def is_whitelisted(self, path: PathLike) -> bool:
        return self._contains(self.resolver.absolutize(path))

    def require_whitelisted(self, path: PathLike, what: str = "Path") -> Path:
        resolved = self.resolver.absolutize(path)
        if not self._contains(resolved):
            shown = redact_str(self.resolver.display(resolved))
            logger.warning("access denied: %s %s", what.lower(), shown)
            raise AccessDenied(f"{what} is not within an allowed directory: {shown}")
        return resolved

    def _contains(self, resolved: Path) -> bool:
        if resolved.is_relative_to(self.resolver.game_root()):
            return True
        # save data is only discovered once something leaves the game root
        return resolved.is_relative_to(self.resolver.resolve_save_data_root())

    # ---------- Entry points ----------

    def file(self, path: PathLike, what: str = "File") -> FileHandle:
        return FileHandle(self.require_whitelisted(path, what), self)

    def directory(self, path: PathLike, what: str = "Directory") -> DirectoryHandle:
        return DirectoryHandle(self.require_whitelisted(path, what), self)

    def save_data_directory(self) -> DirectoryHandle:
        return DirectoryHandle(self.resolver.resolve_save_data_root(), self)

    def game_directory(self) -> DirectoryHandle:
        return DirectoryHandle(self.resolver.game_root(), self)
