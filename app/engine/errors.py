"""Engine exception hierarchy."""


class EngineError(Exception):
    """Base class for engine errors."""


class StorageUnavailableError(EngineError):
    """The history or model store could not be reached."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"storage unavailable during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class OutOfOrderSessionError(EngineError, ValueError):
    """A session was folded into the fitness-fatigue state before a later one."""
