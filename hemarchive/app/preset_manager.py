from __future__ import annotations

import logging
import queue
from pathlib import Path
from typing import Protocol

import mido

from hemarchive.app.step_load import PresetLoader, build_load_items
from hemarchive.app.step_names import NameList
from hemarchive.app.step_save import Saver, SingleSaver
from hemarchive.app.stepper import NilStepper, Stepper, WorkingStatus
from hemarchive.domain.preset_listing import DEFAULT_LISTING_NAME
from hemarchive.protocol.matrix_handler import MatrixHandler
from hemarchive.protocol.midi_handler import dispatch_midi
from hemarchive.protocol.state import Action
from hemarchive.transport.midi_source import MidiSource


class Transport(Protocol):
    def send(self, msg: mido.Message) -> None: ...

    def receive_pending(self) -> list[mido.Message]: ...

    def close(self) -> None: ...


def make_stepper(
    action: Action,
    path: Path | None,
    *,
    listing_name: str = DEFAULT_LISTING_NAME,
    pace_replay: bool = True,
) -> Stepper:
    """The stepper that carries out `action`."""

    if action is Action.LIST_NAMES:
        return NameList(path, listing_name)
    if action is Action.CLEAR:
        return NilStepper()
    if path is None:
        raise ValueError(f"{action.value} needs a file or folder path")
    if action is Action.SAVE_CURRENT:
        return SingleSaver(path)
    if action is Action.SAVE:
        return Saver(path, listing_name)
    if action is Action.LOAD:
        return PresetLoader(build_load_items(path, listing_name), pace=pace_replay)
    raise ValueError(f"{action.value} has no stepper")


class PresetManager:
    """Runs one device action to completion.

    Inbound messages arrive from a `MidiSource` thread and are applied to the
    handler in order. Whenever the queue runs dry the handler gets an idle
    tick and, once ready, the stepper advances. A quiet line gets an editor
    present heartbeat every `heartbeat_s` seconds.
    """

    def __init__(
        self,
        transport: Transport,
        action: Action,
        stepper: Stepper,
        *,
        heartbeat_s: float = 1.0,
    ) -> None:
        self._transport = transport
        self._action = action
        self._stepper = stepper
        self._heartbeat_s = heartbeat_s
        self.handler = MatrixHandler(transport)
        self.status = WorkingStatus.WORKING

        self._logger = logging.getLogger(self.__class__.__name__)

    def handle_midi(self, message: mido.Message) -> WorkingStatus:
        dispatch_midi(self.handler, message)
        return self._step_if_ready()

    def idle(self) -> WorkingStatus:
        """One idle tick: let the handler settle, then step if it is ready."""

        self.handler.on_idle()
        return self._step_if_ready()

    def _step_if_ready(self) -> WorkingStatus:
        if self.handler.is_ready and self.status is WorkingStatus.WORKING:
            self.status = self._stepper.step(self.handler)
        return self.status

    def run(self) -> None:
        source = MidiSource(self._transport)
        source.start()
        self._logger.info("Starting %s", self._action.value)
        try:
            self.handler.start_action(self._action)
            self._loop(source)
            self._logger.info("Finished %s", self._action.value)
        except KeyboardInterrupt:
            self._logger.info("Interrupted; %s did not finish", self._action.value)
            raise
        finally:
            source.stop()
            source.join()
            self._transport.close()

    def _loop(self, source: MidiSource) -> None:
        while True:
            self._check_source(source)
            try:
                message = source.messages.get_nowait()
            except queue.Empty:
                if self.idle() is WorkingStatus.FINISHED:
                    return
                try:
                    message = source.messages.get(timeout=self._heartbeat_s)
                except queue.Empty:
                    self.handler.editor_present()
                    continue
            if self.handle_midi(message) is WorkingStatus.FINISHED:
                return

    @staticmethod
    def _check_source(source: MidiSource) -> None:
        if source.error is not None:
            raise source.error
