"""
Store configuration file: flat KEY=value lines inside the store root.

    USER_IDENT=alice@example.org
    GIT_PATH=git@example.org:alice/secrets.git

GIT_PATH may be empty, in which case the store is not mirrored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigError
from .models import StoreConfig

logger = logging.getLogger("passtree.config")

CONFIG_NAME = ".passtree.conf"
IDENTITY_KEY = "USER_IDENT"
REMOTE_KEY = "GIT_PATH"


def config_path(root: Path) -> Path:
    """Location of the configuration file for a store root."""
    return root / CONFIG_NAME


def parse_config(text: str) -> dict[str, str]:
    """Parse KEY=value lines into a dict.

    Blank lines and # comments are skipped. Only the first '=' splits,
    so values may themselves contain '='.

    Raises:
        ConfigError: If a non-blank line has no '='.
    """
    values: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(f"Malformed config line {lineno}: {raw!r}")
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip()
    return values


def load_config(root: Path) -> StoreConfig:
    """Read the store configuration from its fixed location.

    Args:
        root: Store root directory.

    Returns:
        StoreConfig: The immutable configuration.

    Raises:
        FileNotFoundError: If the store has no configuration yet.
        ConfigError: If the file is malformed or USER_IDENT is missing.
    """
    root = root.expanduser()
    path = config_path(root)
    values = parse_config(path.read_text(encoding="utf-8"))

    for key in values:
        if key not in (IDENTITY_KEY, REMOTE_KEY):
            logger.debug("Ignoring unknown config key %s", key)

    identity = values.get(IDENTITY_KEY)
    if not identity:
        raise ConfigError(f"{IDENTITY_KEY} is not set in {path}")

    try:
        return StoreConfig(
            root=root,
            identity=identity,
            remote=values.get(REMOTE_KEY) or None,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def save_config(config: StoreConfig) -> Path:
    """Write the configuration file for a store.

    Returns:
        Path: The file that was written.
    """
    path = config_path(config.root)
    path.write_text(
        f"{IDENTITY_KEY}={config.identity}\n"
        f"{REMOTE_KEY}={config.remote or ''}\n",
        encoding="utf-8",
    )
    logger.debug("Config written to %s", path)
    return path
