from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from hemarchive.protocol.gather import DataKind, GatherMode


class Action(Enum):
    NOTHING = "nothing"
    LIST_MIDI = "list-midi"
    MONITOR = "monitor"
    LIST_NAMES = "list-names"
    SAVE_CURRENT = "save-current"
    SAVE = "save"
    LOAD = "load"
    CLEAR = "clear"

    @property
    def is_saving(self) -> bool:
        return self in (Action.SAVE_CURRENT, Action.SAVE)


class ArchiveState(Enum):
    UNKNOWN = "unknown"
    OK = "ok"
    FAIL = "fail"


@dataclass
class EngineState:
    """Mutable protocol state, owned by one `MatrixHandler`.

    Inbound event handlers update it; steppers read `ready` and clear it to
    wait for the next acknowledgement.
    """

    action: Action = Action.NOTHING
    gather_mode: GatherMode = GatherMode.NONE
    binary_kind: DataKind = DataKind.UNKNOWN
    in_preset_names: bool = False
    in_archive: bool = False
    archive_state: ArchiveState = ArchiveState.UNKNOWN
    next_bank_to_clear: int | None = None
    ready: bool = False
    names_seen: int = 0
    last_binary: bytes = field(default=b"", repr=False)

    def reset_for(self, action: Action) -> None:
        self.action = action
        self.ready = False
        self.gather_mode = GatherMode.NONE
        self.binary_kind = DataKind.UNKNOWN
        self.archive_state = ArchiveState.UNKNOWN
        self.names_seen = 0
