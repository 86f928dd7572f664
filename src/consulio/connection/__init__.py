"""Connection mapping and the per-session connection directory."""

from .directory import (
    ConnectionDirectory,
    ConnectionInitError,
    DirectoryState,
    DirectoryStateError,
    InitializationReport,
)
from .mapper import Rejected, RejectionReason, map_instance

__all__ = [
    "ConnectionDirectory",
    "ConnectionInitError",
    "DirectoryState",
    "DirectoryStateError",
    "InitializationReport",
    "Rejected",
    "RejectionReason",
    "map_instance",
]
