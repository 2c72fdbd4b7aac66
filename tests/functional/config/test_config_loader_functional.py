from pathlib import Path

import yaml

from config.config_loader import ConfigLoader


def test_save_config_creates_file_and_logs(tmp_path, capsys):
    """
    Functional test: _save_config() writes relay.yml
    and prints the creation message.
    """
    loader = ConfigLoader(config_dir=tmp_path)
    config = {"serial": {"port": "/dev/ttyAMA0"}, "actuation": {"relay_index": 2}}

    loader._save_config(config)

    relay_file = tmp_path / "relay.yml"
    assert relay_file.exists()

    with open(relay_file) as f:
        data = yaml.safe_load(f)
    assert data == config

    captured = capsys.readouterr()
    assert f"Created default relay config at {relay_file}" in captured.out


def test_load_all_creates_default_file(tmp_path, capsys):
    """
    Functional test: load_all() writes defaults if relay.yml is missing,
    and a second load reads them back without rewriting.
    """
    loader = ConfigLoader(config_dir=tmp_path)
    config = loader.load_all()

    relay_file = tmp_path / "relay.yml"
    assert relay_file.exists()
    assert "Created default relay config" in capsys.readouterr().out

    with open(relay_file) as f:
        assert yaml.safe_load(f) == config

    assert loader.load_all() == config
    assert "Created default relay config" not in capsys.readouterr().out


def test_config_dir_is_created(tmp_path):
    config_dir = tmp_path / "nested" / "config"

    ConfigLoader(config_dir=config_dir)

    assert config_dir.is_dir()


def test_shipped_relay_yml_matches_defaults():
    """The repository's config/relay.yml carries the documented defaults."""
    loader = ConfigLoader(config_dir=Path(__file__).parents[3] / "config")

    config = loader.load_relay_config(environ={})

    assert config.link.port == "/dev/rs485"
    assert config.link.parity == "N"
    assert config.slave_id == 255
    assert config.hold_duration == 10
