from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from hemarchive.domain.preset_listing import DEFAULT_LISTING_NAME


@dataclass
class AppConfig:
    device: str | None = None
    heartbeat_s: float = 1.0
    pace_replay: bool = True
    listing_name: str = DEFAULT_LISTING_NAME

    @classmethod
    def default(cls) -> AppConfig:
        return cls()


class ConfigManager:
    def __init__(self, config_path: Path | str = "hem_archive.json") -> None:
        self.config_path = Path(config_path)
        self.config = self.load()

    def load(self) -> AppConfig:
        if not self.config_path.exists():
            logging.info(f"Config file not found at {self.config_path}, using defaults.")
            return AppConfig.default()

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
            defaults = AppConfig.default()
            return AppConfig(
                device=data.get("device", defaults.device),
                heartbeat_s=float(data.get("heartbeat_s", defaults.heartbeat_s)),
                pace_replay=bool(data.get("pace_replay", defaults.pace_replay)),
                listing_name=data.get("listing_name", defaults.listing_name),
            )
        except (OSError, ValueError, AttributeError) as e:
            logging.error(f"Failed to load config: {e}")
            return AppConfig.default()

    def save(self) -> None:
        try:
            with open(self.config_path, "w") as f:
                json.dump(asdict(self.config), f, indent=4)
        except OSError as e:
            logging.error(f"Failed to save config: {e}")

    @property
    def device(self) -> str | None:
        return self.config.device

    @device.setter
    def device(self, value: str | None) -> None:
        self.config.device = value
        self.save()

    @property
    def heartbeat_s(self) -> float:
        return self.config.heartbeat_s

    @property
    def pace_replay(self) -> bool:
        return self.config.pace_replay

    @property
    def listing_name(self) -> str:
        return self.config.listing_name
