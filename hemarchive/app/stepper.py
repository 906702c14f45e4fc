from __future__ import annotations

from enum import Enum
from typing import Protocol

from hemarchive.protocol.matrix_handler import MatrixHandler


class WorkingStatus(Enum):
    WORKING = "working"
    FINISHED = "finished"


class Stepper(Protocol):
    """One user-facing operation, advanced each time the engine is ready."""

    def step(self, handler: MatrixHandler) -> WorkingStatus: ...


class NilStepper:
    """For actions the engine completes by itself (bank clearing)."""

    def step(self, handler: MatrixHandler) -> WorkingStatus:
        return WorkingStatus.FINISHED
