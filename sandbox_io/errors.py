# sandbox_io/errors.py
"""
Error kinds raised by the sandbox. None of them are retried internally.

- ResolutionError: the path could not be canonicalized.
- AccessDenied: the resolved path lies outside both whitelisted roots.
- NotFound: the operation needs existing content and it is absent.
- NoSaveDataLocation: no save-data candidate passed the marker-file probe.
- IoError: any other OS failure on a permitted operation.
"""


class SandboxError(Exception):
    kind = "sandbox_error"


class ResolutionError(SandboxError):
    kind = "resolution_error"


class AccessDenied(SandboxError, PermissionError):
    kind = "access_denied"


class NotFound(SandboxError, FileNotFoundError):
    kind = "not_found"


class NoSaveDataLocation(SandboxError):
    kind = "no_save_data_location"


class IoError(SandboxError):
    kind = "io_error"
