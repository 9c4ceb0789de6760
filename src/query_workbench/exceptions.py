"""Exceptions raised by the workbench core."""


class WorkbenchError(Exception):
    """Base class for all workbench errors."""


class EngineInitError(WorkbenchError):
    """The embedded engine could not be started."""


class QueryExecutionError(WorkbenchError):
    """A statement failed inside the engine.

    The engine's own message is kept verbatim in ``message``.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReflectionError(WorkbenchError):
    """Catalog traversal failed. Never leaves the reflector."""


class SnapshotError(WorkbenchError):
    """Snapshot bytes could not be loaded as a database."""
