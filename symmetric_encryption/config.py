"""
Load a KeyRegistry from environment variables or a .env file.

Variables:
- SYMMETRIC_ENCRYPTION_KEYS: JSON object, key group -> key id -> hex key
- SYMMETRIC_ENCRYPTION_ACTIVE_KEY_IDS: JSON object, key group -> key id

Example .env:
    SYMMETRIC_ENCRYPTION_KEYS={"user-emails": {"1": "0f1e...", "2": "a0b1..."}}
    SYMMETRIC_ENCRYPTION_ACTIVE_KEY_IDS={"user-emails": "2"}
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import dotenv_values

from .errors import ConfigError
from .registry import KeyRegistry

KEYS_ENV_VAR: str = "SYMMETRIC_ENCRYPTION_KEYS"
ACTIVE_KEY_IDS_ENV_VAR: str = "SYMMETRIC_ENCRYPTION_ACTIVE_KEY_IDS"


def load_registry(
    env_file: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> KeyRegistry:
    """
    Build a KeyRegistry from configuration.

    Args:
        env_file: Optional .env file; its values are overridden by ``environ``
        environ: Environment mapping (default: os.environ)

    Returns:
        KeyRegistry instance

    Raises:
        ConfigError: If a variable is missing or malformed
    """
    values: Dict[str, Optional[str]] = {}
    if env_file is not None:
        if not Path(env_file).is_file():
            raise ConfigError(f"Env file not found: {env_file}")
        values.update(dotenv_values(env_file))
    values.update(os.environ if environ is None else environ)

    keys = _load_json(values, KEYS_ENV_VAR)
    active_key_ids = _load_json(values, ACTIVE_KEY_IDS_ENV_VAR)

    for group, group_keys in keys.items():
        if not isinstance(group_keys, dict):
            raise ConfigError(f"{KEYS_ENV_VAR}: keys of group {group!r} must be an object")
        for key_id, key_hex in group_keys.items():
            if not isinstance(key_hex, str):
                raise ConfigError(
                    f"{KEYS_ENV_VAR}: key {key_id!r} of group {group!r} must be a hex string"
                )

    for group, key_id in active_key_ids.items():
        if not isinstance(key_id, str):
            raise ConfigError(
                f"{ACTIVE_KEY_IDS_ENV_VAR}: active key id of group {group!r} must be a string"
            )

    return KeyRegistry(keys, active_key_ids)


def _load_json(values: Mapping[str, Optional[str]], name: str) -> Dict[str, Any]:
    """Internal: parse one JSON object variable."""
    raw = values.get(name)
    if not raw:
        raise ConfigError(f"{name} must be set in environment or .env file")

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        # Position only; the document may hold key material.
        raise ConfigError(f"{name} is not valid JSON (line {e.lineno}, column {e.colno})") from None

    if not isinstance(parsed, dict):
        raise ConfigError(f"{name} must be a JSON object")
    return parsed
