# sandbox_io/services/file_handle.py
from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from sandbox_io.errors import IoError, NotFound

if TYPE_CHECKING:
    from sandbox_io.services.directory_handle import DirectoryHandle
    from sandbox_io.services.path_resolver import PathLike
    from sandbox_io.services.sandbox import SandboxAuthority


def io_error(action: str, shown: str, exc: Exception) -> IoError:
    reason = getattr(exc, "strerror", None) or str(exc)
    return IoError(f"Could not {action} {shown}: {reason}")


@dataclass(frozen=True)
class FileHandle:
    """
    Sandbox-checked reference to a file.

    Obtain one through SandboxAuthority.file() or DirectoryHandle.file(); the
    path was whitelisted when the handle was made and never changes. No file
    descriptor is held between calls.
    """
    resolved: Path
    sandbox: SandboxAuthority = field(compare=False, repr=False)

    # ---------- Naming (no I/O) ----------

    def path(self) -> str:
        return self.sandbox.resolver.display(self.resolved)

    def name(self) -> str:
        return self.resolved.name

    def name_without_extension(self) -> str:
        return self.resolved.stem

    def extension(self) -> str:
        return self.resolved.suffix[1:]

    def parent(self) -> Optional[DirectoryHandle]:
        parent = self.resolved.parent
        if parent == self.resolved:
            return None
        return self.sandbox.directory(parent, what="Parent")

    # ---------- Content ----------

    def read_bytes(self) -> bytes:
        self._require_exists()
        try:
            return self.resolved.read_bytes()
        except OSError as exc:
            raise io_error("read", self.path(), exc) from exc

    def read_text(self) -> str:
        self._require_exists()
        try:
            return self.resolved.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise io_error("read", self.path(), exc) from exc

    def write_bytes(self, content: bytes) -> None:
        try:
            self.resolved.parent.mkdir(parents=True, exist_ok=True)
            self.resolved.write_bytes(content)
        except OSError as exc:
            raise io_error("write", self.path(), exc) from exc

    def write_text(self, content: str) -> None:
        try:
            self.resolved.parent.mkdir(parents=True, exist_ok=True)
            self.resolved.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise io_error("write", self.path(), exc) from exc

    # ---------- Copy / move ----------

    def copy(self, destination: PathLike) -> FileHandle:
        target = self.sandbox.file(destination, what="Destination")
        self._require_file()
        try:
            target.resolved.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.resolved, target.resolved)
            shutil.copymode(self.resolved, target.resolved)
        except OSError as exc:
            raise io_error("copy", self.path(), exc) from exc
        return target

    def move(self, destination: PathLike) -> FileHandle:
        target = self.sandbox.file(destination, what="Destination")
        self._require_file()
        try:
            if target.resolved.is_dir():
                raise IsADirectoryError(f"destination {target.path()} is a directory")
            target.resolved.parent.mkdir(parents=True, exist_ok=True)
            # shutil.move falls back to copy + unlink across devices
            shutil.move(os.fspath(self.resolved), os.fspath(target.resolved))
        except OSError as exc:
            raise io_error("move", self.path(), exc) from exc
        return target

    # ---------- Existence ----------

    def exists(self) -> bool:
        return os.path.exists(self.resolved)

    def delete(self) -> None:
        try:
            self.resolved.unlink(missing_ok=True)
        except OSError as exc:
            raise io_error("delete", self.path(), exc) from exc

    def _require_exists(self) -> None:
        if not self.exists():
            raise NotFound(f"File does not exist: {self.path()}")

    def _require_file(self) -> None:
        self._require_exists()
        if self.resolved.is_dir():
            raise IoError(f"Not a file: {self.path()} is a directory")
