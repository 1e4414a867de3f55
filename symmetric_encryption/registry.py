"""
Immutable in-memory key registry.

Maps (key group, key id) to hex-encoded key material, and each key group to
the key id that is active for new encryptions. The registry is built once from
configuration and never mutated; rotating keys means building a new registry
with a different active key id (see KeyRegistry.with_active_key_id).
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple

from .crypto import SecureKey
from .errors import ConfigError, UnknownKeyIdError

logger = logging.getLogger(__name__)


class KeyRegistry:
    """
    Read-only lookup of key material by key group and key id.

    Key material stays hex-encoded until it is looked up, and is only ever
    handed out wrapped in a SecureKey.
    """

    __slots__ = ("_keys", "_active_key_ids")

    def __init__(
        self,
        keys: Mapping[str, Mapping[str, str]],
        active_key_ids: Mapping[str, str],
    ) -> None:
        """
        Initialize the registry.

        Args:
            keys: key group -> key id -> hex-encoded key
            active_key_ids: key group -> active key id

        Active key ids are not checked against ``keys``; a missing one
        surfaces as UnknownKeyIdError on the first encryption.
        """
        self._keys: Mapping[str, Mapping[str, str]] = MappingProxyType(
            {str(group): MappingProxyType(dict(group_keys)) for group, group_keys in keys.items()}
        )
        self._active_key_ids: Mapping[str, str] = MappingProxyType(dict(active_key_ids))
        logger.info(
            "Key registry loaded: %d key group(s), %d key(s)",
            len(self._keys),
            sum(len(group_keys) for group_keys in self._keys.values()),
        )

    @property
    def groups(self) -> Tuple[str, ...]:
        """Names of all key groups holding keys."""
        return tuple(self._keys)

    def key_ids(self, key_group: str) -> Tuple[str, ...]:
        """Key ids known in a group (empty for unknown groups)."""
        return tuple(self._keys.get(key_group, ()))

    def has_key(self, key_group: str, key_id: str) -> bool:
        """Check whether a key id exists within a group."""
        return key_id in self._keys.get(key_group, {})

    def get_key(self, key_group: str, key_id: str) -> SecureKey:
        """
        Get key material for a key id within a group.

        Args:
            key_group: Key group name
            key_id: Key id within the group

        Returns:
            Decoded key material

        Raises:
            UnknownKeyIdError: If the group or the key id is absent
            ConfigError: If the stored key is not valid hex
        """
        try:
            key_hex = self._keys[key_group][key_id]
        except KeyError:
            raise UnknownKeyIdError(key_group, key_id) from None

        try:
            return SecureKey.from_hex(key_hex)
        except ValueError:
            raise ConfigError(
                f"Key {key_id!r} in key group {key_group!r} is not valid hex"
            ) from None

    def get_active_key_id(self, key_group: str) -> str:
        """
        Get the key id used for new encryptions in a group.

        Raises:
            ConfigError: If no active key id is configured for the group
        """
        try:
            return self._active_key_ids[key_group]
        except KeyError:
            raise ConfigError(f"No active key id configured for key group {key_group!r}") from None

    def with_active_key_id(self, key_group: str, key_id: str) -> KeyRegistry:
        """
        Return a new registry with a different active key id for one group.

        The current registry is left untouched.
        """
        active_key_ids: Dict[str, str] = dict(self._active_key_ids)
        active_key_ids[key_group] = key_id
        return KeyRegistry(self._keys, active_key_ids)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        """Iterate over (key group, key id) pairs."""
        for group, group_keys in self._keys.items():
            for key_id in group_keys:
                yield group, key_id

    def __repr__(self) -> str:
        """Lists groups and key ids only, never key material."""
        groups = {group: list(group_keys) for group, group_keys in self._keys.items()}
        return f"KeyRegistry(keys={groups!r}, active_key_ids={dict(self._active_key_ids)!r})"
