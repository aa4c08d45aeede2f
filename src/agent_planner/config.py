"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs

APP_NAME = "agent-planner"
APP_AUTHOR = "agent-planner"


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	config_file: Path = field(init=False)
	log_dir: Path = field(init=False)

	# User-configurable
	log_level: str = "INFO"
	delegation_timeout: Optional[float] = None  # seconds, None = no deadline
	mcp_servers: dict[str, dict] = field(default_factory=dict)

	def __post_init__(self) -> None:
		self.config_file = self.config_dir / "config.toml"
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


def _apply_env_overrides(config: Config) -> Config:
	"""Apply AGENT_PLANNER_* environment variable overrides."""
	path_env = {
		"AGENT_PLANNER_CONFIG_DIR": "config_dir",
		"AGENT_PLANNER_DATA_DIR": "data_dir",
	}
	for env_key, attr in path_env.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val))

	level = os.getenv("AGENT_PLANNER_LOG_LEVEL")
	if level:
		config.log_level = level.upper()

	timeout = os.getenv("AGENT_PLANNER_DELEGATION_TIMEOUT")
	if timeout:
		config.delegation_timeout = float(timeout)

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	if not config.config_file.exists():
		return config

	with open(config.config_file, "rb") as f:
		data = tomllib.load(f)

	path_fields = {"config_dir", "data_dir"}
	for key, val in data.items():
		if hasattr(config, key):
			if key in path_fields:
				setattr(config, key, Path(os.path.expanduser(val)))
			else:
				setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# Directory overrides decide where config.toml is looked up
	config = _apply_env_overrides(config)
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
