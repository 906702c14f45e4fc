"""Tests for the JSON settings file."""

from __future__ import annotations

import json
import logging

from hemarchive.app.config import AppConfig, ConfigManager


class TestConfigManager:
    def test_missing_file_gives_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "hem_archive.json")
        assert manager.config == AppConfig()
        assert manager.heartbeat_s == 1.0
        assert manager.pace_replay is True
        assert manager.listing_name == "UserPresets.txt"

    def test_device_is_persisted(self, tmp_path):
        path = tmp_path / "hem_archive.json"
        ConfigManager(path).device = "Mini"

        assert json.loads(path.read_text())["device"] == "Mini"
        assert ConfigManager(path).device == "Mini"

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "hem_archive.json"
        path.write_text(json.dumps({"heartbeat_s": 0.5, "pace_replay": False}))

        manager = ConfigManager(path)

        assert manager.heartbeat_s == 0.5
        assert manager.pace_replay is False
        assert manager.device is None

    def test_unreadable_file_falls_back(self, tmp_path, caplog):
        path = tmp_path / "hem_archive.json"
        path.write_text("{not json")

        with caplog.at_level(logging.ERROR):
            manager = ConfigManager(path)

        assert manager.config == AppConfig()
        assert "Failed to load config" in caplog.text
