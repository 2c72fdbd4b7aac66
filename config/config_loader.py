# config/config_loader.py
"""
Config loader for the relay actuator YAML configuration.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from relay_pulse.protocols.modbus.coil_channel import SerialLink

TTY_PATH_ENV = "TTY_PATH"

DEFAULT_TTY_PATH = "/dev/rs485"
DEFAULT_BAUDRATE = 9600
DEFAULT_SLAVE_ID = 255
DEFAULT_RELAY_INDEX = 0
DEFAULT_HOLD_DURATION = 10


@dataclass(frozen=True)
class RelayConfig:
    """Everything the actuator needs, resolved once at startup."""

    link: SerialLink
    slave_id: int = DEFAULT_SLAVE_ID
    relay_index: int = DEFAULT_RELAY_INDEX
    hold_duration: int = DEFAULT_HOLD_DURATION


class ConfigLoader:
    """Loads relay.yml, writing the defaults when it is missing."""

    def __init__(self, config_dir="config"):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_all(self):
        """Load the configuration file merged over defaults."""
        defaults = self._create_default_config()
        config = {
            "serial": dict(defaults["serial"]),
            "actuation": dict(defaults["actuation"]),
        }

        relay_path = self.config_dir / "relay.yml"
        if relay_path.exists():
            with open(relay_path) as f:
                relay_data = yaml.safe_load(f) or {}
                config["serial"].update(relay_data.get("serial", {}) or {})
                config["actuation"].update(relay_data.get("actuation", {}) or {})
        else:
            self._save_config(defaults)

        return config

    def load_relay_config(self, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build a RelayConfig, letting TTY_PATH override the serial port."""
        if environ is None:
            environ = os.environ

        config = self.load_all()
        serial = config["serial"]
        actuation = config["actuation"]

        link = SerialLink(
            port=environ.get(TTY_PATH_ENV) or str(serial["port"]),
            baudrate=int(serial["baudrate"]),
            bytesize=int(serial["bytesize"]),
            parity=str(serial["parity"]),
            stopbits=int(serial["stopbits"]),
            timeout=float(serial["timeout"]),
        )

        return RelayConfig(
            link=link,
            slave_id=int(serial["slave_id"]),
            relay_index=int(actuation["relay_index"]),
            hold_duration=int(actuation["hold_duration"]),
        )

    def _create_default_config(self):
        """Create default relay configuration."""
        return {
            "serial": {
                "port": DEFAULT_TTY_PATH,
                "baudrate": DEFAULT_BAUDRATE,
                "bytesize": 8,
                "parity": "N",
                "stopbits": 1,
                "timeout": 1.0,
                "slave_id": DEFAULT_SLAVE_ID,
            },
            "actuation": {
                "relay_index": DEFAULT_RELAY_INDEX,
                "hold_duration": DEFAULT_HOLD_DURATION,
            },
        }

    def _save_config(self, config):
        """Save relay configuration to file."""
        relay_path = self.config_dir / "relay.yml"
        with open(relay_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False)
        print(f"[INFO] Created default relay config at {relay_path}")
