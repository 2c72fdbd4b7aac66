# tests/unit/config/test_config_loader.py
import yaml

from config.config_loader import (
    DEFAULT_TTY_PATH,
    TTY_PATH_ENV,
    ConfigLoader,
    RelayConfig,
)


def test_create_default_config(tmp_path):
    loader = ConfigLoader(config_dir=tmp_path)
    defaults = loader._create_default_config()

    assert defaults["serial"]["port"] == "/dev/rs485"
    assert defaults["serial"]["baudrate"] == 9600
    assert defaults["serial"]["slave_id"] == 255
    assert defaults["actuation"] == {"relay_index": 0, "hold_duration": 10}


def test_save_and_load_config(tmp_path):
    loader = ConfigLoader(config_dir=tmp_path)
    loader._save_config(loader._create_default_config())

    relay_path = tmp_path / "relay.yml"
    assert relay_path.exists()

    with open(relay_path) as f:
        data = yaml.safe_load(f)
    assert data["serial"]["parity"] == "N"
    assert loader.load_all() == loader._create_default_config()


def test_partial_file_merges_over_defaults(write_config_file, temp_config_dir):
    write_config_file({"serial": {"baudrate": 19200}, "actuation": {"relay_index": 4}})
    loader = ConfigLoader(config_dir=temp_config_dir)

    config = loader.load_all()

    assert config["serial"]["baudrate"] == 19200
    assert config["serial"]["port"] == DEFAULT_TTY_PATH
    assert config["actuation"] == {"relay_index": 4, "hold_duration": 10}


def test_empty_file_yields_defaults(temp_config_dir):
    (temp_config_dir / "relay.yml").write_text("")
    loader = ConfigLoader(config_dir=temp_config_dir)

    assert loader.load_all() == loader._create_default_config()


def test_load_relay_config_defaults(tmp_path):
    config = ConfigLoader(config_dir=tmp_path).load_relay_config(environ={})

    assert isinstance(config, RelayConfig)
    assert config.link.port == "/dev/rs485"
    assert config.link.baudrate == 9600
    assert config.slave_id == 255
    assert config.relay_index == 0
    assert config.hold_duration == 10


def test_tty_path_env_overrides_port(write_config_file, temp_config_dir):
    write_config_file({"serial": {"port": "/dev/ttyS0"}})
    loader = ConfigLoader(config_dir=temp_config_dir)

    config = loader.load_relay_config(environ={TTY_PATH_ENV: "/dev/ttyUSB1"})

    assert config.link.port == "/dev/ttyUSB1"


def test_empty_tty_path_env_ignored(write_config_file, temp_config_dir):
    write_config_file({"serial": {"port": "/dev/ttyS0"}})
    loader = ConfigLoader(config_dir=temp_config_dir)

    config = loader.load_relay_config(environ={TTY_PATH_ENV: ""})

    assert config.link.port == "/dev/ttyS0"
