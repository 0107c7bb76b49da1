import os


class IoError(OSError):
    """Base class of every error raised while resolving or using a handle."""


class OpenFailed(IoError):
    def __init__(self, path: str | os.PathLike[str], cause: OSError):
        super().__init__(cause.errno, cause.strerror or str(cause), os.fspath(path))
        self.path = path
        self.cause = cause

    def __str__(self):
        return f"failed to open '{os.fspath(self.path)}': {self.strerror}"


class FlushFailed(IoError):
    def __init__(self, cause: OSError):
        super().__init__(cause.errno, cause.strerror or str(cause))
        self.cause = cause

    def __str__(self):
        return f"failed to flush output: {self.strerror}"


class ContentionError(IoError):
    def __init__(self, message: str = "handle is already locked"):
        super().__init__(message)
