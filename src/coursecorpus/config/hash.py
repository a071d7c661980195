"""Config hashing and YAML persistence."""

import hashlib
import json
from pathlib import Path

import yaml

from coursecorpus.config.schema import LoaderConfig
from coursecorpus.errors import ConfigError


def canonicalize_config(config: LoaderConfig) -> str:
    """Convert config to canonical JSON string for hashing."""
    return json.dumps(config.to_dict(), sort_keys=True, separators=(",", ":"))


def compute_config_hash(config: LoaderConfig) -> str:
    """Compute deterministic hash of a loader configuration."""
    return hashlib.sha256(canonicalize_config(config).encode()).hexdigest()[:16]


def config_to_yaml(config: LoaderConfig) -> str:
    """Convert config to YAML string."""
    return yaml.dump(config.to_dict(), sort_keys=True, default_flow_style=False)


def config_from_yaml(yaml_str: str) -> LoaderConfig:
    """Load config from YAML string."""
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML config: {e}") from e
    if data is not None and not isinstance(data, dict):
        raise ConfigError("Config YAML must be a mapping")
    return LoaderConfig.from_dict(data)


def load_config(path: str | Path) -> LoaderConfig:
    """Load config from a YAML file."""
    return config_from_yaml(Path(path).read_text(encoding="utf-8"))
