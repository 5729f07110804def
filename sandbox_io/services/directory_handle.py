# sandbox_io/services/directory_handle.py
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple, Union

from sandbox_io.errors import NotFound
from sandbox_io.services.file_handle import FileHandle, io_error

if TYPE_CHECKING:
    from sandbox_io.services.path_resolver import PathLike
    from sandbox_io.services.sandbox import SandboxAuthority

logger = logging.getLogger(__name__)

Segments = Union[str, Sequence[str]]


@dataclass(frozen=True)
class DirectoryHandle:
    """
    Sandbox-checked reference to a directory.

    Same construction rules as FileHandle. Every handle derived from this one
    (children, parent, joined paths) is checked against the sandbox again.
    """
    resolved: Path
    sandbox: SandboxAuthority = field(compare=False, repr=False)

    def path(self) -> str:
        return self.sandbox.resolver.display(self.resolved, directory=True)

    def name(self) -> str:
        return self.resolved.name

    def parent(self) -> Optional[DirectoryHandle]:
        parent = self.resolved.parent
        if parent == self.resolved:
            return None
        return self.sandbox.directory(parent, what="Parent")

    # ---------- Navigation ----------

    def file(self, *segments: Segments) -> FileHandle:
        return self.sandbox.file(self._join(segments), what="File")

    def directory(self, *segments: Segments) -> DirectoryHandle:
        return self.sandbox.directory(self._join(segments), what="Directory")

    def relativize(self, other: PathLike) -> Optional[str]:
        resolver = self.sandbox.resolver
        return resolver.relativize(self.resolved, resolver.absolutize(other))

    def _join(self, segments: Tuple[Segments, ...]) -> Path:
        # accepts file("a", "b") as well as file(["a", "b"])
        if len(segments) == 1 and isinstance(segments[0], (list, tuple)):
            segments = tuple(segments[0])
        return self.resolved.joinpath(*segments)

    # ---------- Enumeration ----------

    def files(self) -> List[FileHandle]:
        return [FileHandle(p, self.sandbox) for p in self._children(want_dirs=False)]

    def directories(self) -> List[DirectoryHandle]:
        return [DirectoryHandle(p, self.sandbox) for p in self._children(want_dirs=True)]

    def _children(self, want_dirs: bool) -> Iterator[Path]:
        if not self.exists():
            raise NotFound(f"Directory does not exist: {self.path()}")
        try:
            with os.scandir(self.resolved) as it:
                # is_file()/is_dir() follow symlinks
                entries = sorted(
                    entry.path for entry in it
                    if (entry.is_dir() if want_dirs else entry.is_file())
                )
        except OSError as exc:
            raise io_error("list", self.path(), exc) from exc

        for entry_path in entries:
            child = self.sandbox.resolver.absolutize(entry_path)
            if not self.sandbox.is_whitelisted(child):
                logger.debug("skipping %s, resolves outside the sandbox", entry_path)
                continue
            yield child

    # ---------- Mutation ----------

    def make_directories(self) -> DirectoryHandle:
        self.sandbox.require_whitelisted(self.resolved, "Directory")
        try:
            self.resolved.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise io_error("create", self.path(), exc) from exc
        return self

    def exists(self) -> bool:
        return os.path.exists(self.resolved)

    def delete(self) -> None:
        if not self.exists():
            return
        try:
            shutil.rmtree(self.resolved)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise io_error("delete", self.path(), exc) from exc
