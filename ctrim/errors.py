"""Fatal error types raised while trimming a file."""


class TrimError(Exception):
    """Base class for every condition that aborts a trim run."""


class InputError(TrimError):
    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"input file does not exist or is unreadable: {path}: {reason}")


class OutputError(TrimError):
    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to open output {path}: {reason}")
