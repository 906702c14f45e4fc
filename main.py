import argparse
import logging
import sys
from pathlib import Path

from midi import HakenMidi

from hemarchive.app.config import ConfigManager
from hemarchive.app.monitor import run_monitor
from hemarchive.app.preset_manager import PresetManager, make_stepper
from hemarchive.errors import HemArchiveError
from hemarchive.logging_setup import configure_logging
from hemarchive.protocol.state import Action
from hemarchive.transport.midi_transport import MidiTransport


ACTION_FLAGS = (
    ("-i", "--input", Action.LIST_MIDI, "Print list of connected MIDI devices."),
    ("-m", "--monitor", Action.MONITOR, "Log MIDI received from the selected device."),
    ("-c", "--clear", Action.CLEAR, "Clear all user presets from the device."),
    ("-p", "--print", Action.LIST_NAMES, "Print list of user presets (and write a listing to PATH if given)."),
    ("-e", "--edit", Action.SAVE_CURRENT, "Save current editing slot to PATH."),
    ("-s", "--save", Action.SAVE, "Save user presets from the device to PATH."),
    ("-l", "--load", Action.LOAD, "Load user presets from PATH to the device."),
)

PATH_ACTIONS = (Action.SAVE_CURRENT, Action.SAVE, Action.LOAD)

SAVE_LABELS = {
    Action.SAVE_CURRENT: "Save edit",
    Action.SAVE: "Save",
    Action.LOAD: "Load",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hem-archive",
        description=(
            "Load and save presets from any device with Haken Audio's EaganMatrix engine. "
            "Cannot be used while the Haken editor is running."
        ),
    )
    parser.add_argument(
        "-d",
        "--device",
        default=None,
        help="Name of the device to use; a partial name is enough when it is unique.",
    )
    actions = parser.add_mutually_exclusive_group(required=True)
    for short, long, action, help_text in ACTION_FLAGS:
        actions.add_argument(short, long, dest="action", action="store_const", const=action, help=help_text)
    parser.add_argument("path", nargs="?", type=Path, default=None, help="Preset file, listing or folder.")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Can also use HEM_LOG_LEVEL env var.",
    )
    parser.add_argument(
        "--config",
        default="hem_archive.json",
        help="Path of the JSON settings file. Default: hem_archive.json.",
    )
    parser.add_argument(
        "--remember-device",
        action="store_true",
        help="Store --device in the settings file as the default device.",
    )
    return parser


def validate_path(action: Action, path: Path | None) -> str | None:
    """Problem with `path` for `action`, or None when it is usable."""

    if action not in PATH_ACTIONS:
        return None
    if path is None:
        return "Missing folder to save/restore to/from."
    if path.exists():
        return None
    folder = path.parent
    if action is not Action.LOAD and folder.is_dir():
        return None
    return f"Path not found: '{path}'"


def list_midi_devices(midi: HakenMidi, logger: logging.Logger) -> None:
    ports = midi.list_ports()
    logger.info("MIDI devices:")
    for name in ports.inputs:
        logger.info(" in: %s", name)
    for name in ports.outputs:
        logger.info("out: %s", name)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(cli_level=args.log_level)
    logger = logging.getLogger("main")

    config = ConfigManager(args.config)
    if args.remember_device and args.device:
        config.device = args.device
    device = args.device or config.device

    problem = validate_path(args.action, args.path)
    if problem is not None:
        parser.error(problem)

    try:
        midi = HakenMidi()
        if args.action is Action.LIST_MIDI:
            list_midi_devices(midi, logger)
            return 0

        transport = MidiTransport(midi)
        if args.action in SAVE_LABELS:
            label = SAVE_LABELS[args.action]
            if device:
                logger.info("%s preset for %s with %s", label, device, args.path)
            else:
                logger.info("%s preset with %s", label, args.path)

        if args.action is Action.MONITOR:
            logger.info("Monitoring MIDI. Press Ctrl-C to stop.")
            info = transport.connect(device)
            logger.info("Using %s", info.friendly_name)
            run_monitor(transport, heartbeat_s=config.heartbeat_s)
            return 0

        stepper = make_stepper(
            args.action,
            args.path,
            listing_name=config.listing_name,
            pace_replay=config.pace_replay,
        )
        info = transport.connect(device)
        logger.info("Using %s", info.friendly_name)
        manager = PresetManager(transport, args.action, stepper, heartbeat_s=config.heartbeat_s)
        manager.run()
    except KeyboardInterrupt:
        return 130
    except (HemArchiveError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
