"""Deal configuration shared by the command line tools and the plan API."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, MutableMapping, Sequence

from scripts.deck import group_sizes

CONFIG_ERROR_MESSAGE = "Card counts must be positive integers."

DEFAULT_GAMES = 100


class ConfigError(ValueError):
    """Raised when a deal configuration cannot be used."""

    def __init__(self, message: str = CONFIG_ERROR_MESSAGE) -> None:
        super().__init__(message)


def coerce_size(value: Any, *, allow_zero: bool = False) -> int:
    """Convert *value* into a card count.

    Counts usually arrive as command line tokens or JSON numbers.  Integers
    and decimal strings are accepted; booleans, floats, blanks and anything
    negative (or zero unless *allow_zero*) raise :class:`ConfigError`.
    """

    if value is None or isinstance(value, bool):
        raise ConfigError()
    if isinstance(value, int):
        candidate = value
    elif isinstance(value, str):
        token = value.strip()
        if not token:
            raise ConfigError()
        try:
            candidate = int(token, 10)
        except ValueError as exc:
            raise ConfigError() from exc
    else:
        raise ConfigError()

    if candidate < 0 or (candidate == 0 and not allow_zero):
        raise ConfigError()
    return candidate


def _coerce_seed(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError("Seed must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return int(value.strip(), 10)
        except ValueError as exc:
            raise ConfigError("Seed must be an integer.") from exc
    raise ConfigError("Seed must be an integer.")


@dataclass(frozen=True)
class DealConfig:
    """How many cards to deal and how they are grouped."""

    unique: int = 0
    groups: tuple[int, ...] = field(default_factory=tuple)
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "unique", coerce_size(self.unique, allow_zero=True))
        object.__setattr__(self, "groups", tuple(coerce_size(size) for size in self.groups))
        object.__setattr__(self, "seed", _coerce_seed(self.seed))
        if self.size == 0:
            raise ConfigError()

    @property
    def group_sizes(self) -> list[int]:
        """One group per unique card followed by the configured groups."""
        return group_sizes(self.unique, self.groups)

    @property
    def size(self) -> int:
        return self.unique + sum(self.groups)

    def to_dict(self) -> MutableMapping[str, Any]:
        """Return the configuration as a JSON-serialisable mapping."""
        payload = dict(asdict(self))
        payload["groups"] = list(self.groups)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DealConfig":
        """Create a configuration from *data* produced by :meth:`to_dict`."""
        groups = data.get("groups") or ()
        if isinstance(groups, (str, bytes)) or not isinstance(groups, Sequence):
            raise ConfigError()
        return cls(
            unique=data.get("unique", 0),
            groups=tuple(groups),
            seed=data.get("seed"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "DealConfig":
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ConfigError("Configuration is not valid JSON.") from exc
        if not isinstance(data, Mapping):
            raise ConfigError()
        return cls.from_dict(data)


__all__ = [
    "CONFIG_ERROR_MESSAGE",
    "ConfigError",
    "DEFAULT_GAMES",
    "DealConfig",
    "coerce_size",
]
