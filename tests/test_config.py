"""Tests for the configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

from agent_planner.config import Config, _apply_env_overrides, load_config


def test_config_defaults():
	"""Config should have sensible defaults."""
	config = Config()
	assert config.config_dir.is_absolute()
	assert config.data_dir.is_absolute()
	assert config.config_file == config.config_dir / "config.toml"
	assert config.log_dir == config.data_dir / "logs"
	assert config.log_level == "INFO"
	assert config.delegation_timeout is None
	assert config.mcp_servers == {}


def test_config_env_overrides():
	"""Environment variables should override defaults."""
	config = Config()
	with patch.dict(os.environ, {
		"AGENT_PLANNER_DATA_DIR": "/tmp/test-data",
		"AGENT_PLANNER_CONFIG_DIR": "/tmp/test-config",
		"AGENT_PLANNER_LOG_LEVEL": "debug",
		"AGENT_PLANNER_DELEGATION_TIMEOUT": "7.5",
	}):
		config = _apply_env_overrides(config)
		assert config.data_dir == Path("/tmp/test-data")
		assert config.config_dir == Path("/tmp/test-config")
		assert config.log_level == "DEBUG"
		assert config.delegation_timeout == 7.5
		# Derived paths should be recomputed
		assert config.log_dir == Path("/tmp/test-data/logs")
		assert config.config_file == Path("/tmp/test-config/config.toml")


def test_config_ensure_dirs(tmp_path: Path):
	"""ensure_dirs should create all required directories."""
	config = Config(
		config_dir=tmp_path / "config",
		data_dir=tmp_path / "data",
	)
	assert not config.config_dir.exists()

	config.ensure_dirs()

	assert config.config_dir.exists()
	assert config.data_dir.exists()
	assert config.log_dir.exists()


def test_load_config_reads_toml_servers(tmp_path: Path):
	"""config.toml in the overridden config dir supplies mcp_servers."""
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text(
		'delegation_timeout = 30\n'
		'\n'
		'[mcp_servers.echo]\n'
		'command = "cat"\n'
		'args = ["-u"]\n'
		'\n'
		'[mcp_servers.remote]\n'
		'url = "http://localhost:8080/run"\n'
		'enabled = false\n'
	)

	with patch.dict(os.environ, {
		"AGENT_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"AGENT_PLANNER_CONFIG_DIR": str(config_dir),
	}):
		config = load_config()

	assert config.delegation_timeout == 30
	assert config.mcp_servers["echo"] == {"command": "cat", "args": ["-u"]}
	assert config.mcp_servers["remote"]["enabled"] is False
	assert config.data_dir.exists()


def test_env_beats_toml(tmp_path: Path):
	"""Environment variables take precedence over config.toml."""
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text('log_level = "WARNING"\n')

	with patch.dict(os.environ, {
		"AGENT_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"AGENT_PLANNER_CONFIG_DIR": str(config_dir),
		"AGENT_PLANNER_LOG_LEVEL": "ERROR",
	}):
		config = load_config()

	assert config.log_level == "ERROR"


def test_load_config_without_toml(tmp_path: Path):
	"""Missing config.toml falls back to defaults."""
	with patch.dict(os.environ, {
		"AGENT_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"AGENT_PLANNER_CONFIG_DIR": str(tmp_path / "config"),
	}):
		config = load_config()

	assert config.mcp_servers == {}
	assert config.config_dir.exists()


def test_get_config_is_cached(tmp_path: Path):
	"""get_config loads once and returns the same instance afterwards."""
	from agent_planner import config as config_module

	with patch.object(config_module, "_config", None), patch.dict(os.environ, {
		"AGENT_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"AGENT_PLANNER_CONFIG_DIR": str(tmp_path / "config"),
	}):
		first = config_module.get_config()
		second = config_module.get_config()

	assert first is second
	assert first.data_dir == tmp_path / "data"
