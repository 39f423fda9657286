"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "MERKLE_"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


@dataclass
class TreeConfig:
    """
    Configuration threaded through tree construction, proof generation
    and verification.

    parallel_threshold is the minimum number of pairs in a layer before it
    is hashed on a thread pool; None disables the pool.
    """
    hash_algorithm: str = "sha256"
    encoder: str = "typed"
    sort_leaves: bool = True
    deduplicate: bool = False
    parallel_threshold: Optional[int] = 4096
    max_workers: Optional[int] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MERKLE_HASH_ALGORITHM: sha256, keccak256, sha3_256, blake2b
        - MERKLE_ENCODER: typed, json
        - MERKLE_SORT_LEAVES: Sort leaf hashes (true/false)
        - MERKLE_DEDUPLICATE: Drop repeated leaves (true/false)
        - MERKLE_PARALLEL_THRESHOLD: Pairs per layer before using threads
          ("none" disables)
        - MERKLE_MAX_WORKERS: Thread pool size
        - MERKLE_LOG_LEVEL: Log level
        - MERKLE_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}ENCODER"):
            overrides.setdefault("tree", {})["encoder"] = os.getenv(f"{ENV_PREFIX}ENCODER")
        if os.getenv(f"{ENV_PREFIX}SORT_LEAVES"):
            overrides.setdefault("tree", {})["sort_leaves"] = _env_bool(f"{ENV_PREFIX}SORT_LEAVES", "true")
        if os.getenv(f"{ENV_PREFIX}DEDUPLICATE"):
            overrides.setdefault("tree", {})["deduplicate"] = _env_bool(f"{ENV_PREFIX}DEDUPLICATE", "false")
        if os.getenv(f"{ENV_PREFIX}PARALLEL_THRESHOLD"):
            raw = os.getenv(f"{ENV_PREFIX}PARALLEL_THRESHOLD", "")
            overrides.setdefault("tree", {})["parallel_threshold"] = (
                None if raw.strip().lower() == "none" else int(raw)
            )
        if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            overrides.setdefault("tree", {})["max_workers"] = int(os.getenv(f"{ENV_PREFIX}MAX_WORKERS", "0")) or None

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """
        Create configuration from a dictionary.

        Unknown keys inside "tree" raise TypeError.
        """
        tree_data = data.get("tree", {})
        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()

        return cls(
            tree=tree,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> "RuntimeConfig":
        """
        Load configuration from an optional YAML file, then apply env overrides.

        Environment variables take precedence over file settings.
        """
        config = cls.from_yaml(path) if path is not None else cls()
        return config.with_env_overrides()

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "hash_algorithm": self.tree.hash_algorithm,
                "encoder": self.tree.encoder,
                "sort_leaves": self.tree.sort_leaves,
                "deduplicate": self.tree.deduplicate,
                "parallel_threshold": self.tree.parallel_threshold,
                "max_workers": self.tree.max_workers,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


def get_default_config_template() -> str:
    """Get a template configuration file (YAML)."""
    return """\
tree:
  hash_algorithm: sha256   # sha256, keccak256, sha3_256, blake2b
  encoder: typed           # typed, json
  sort_leaves: true
  deduplicate: false
  parallel_threshold: 4096 # pairs per layer before hashing on threads; null disables
  max_workers: null
log_level: INFO
log_file: null
"""
