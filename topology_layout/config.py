"""Layout configuration.

All geometric scale parameters are supplied by the caller; nothing is derived
from display or environment state.  Defaults reproduce the proportions of the
monitoring dashboard the engine was built for.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from .core.device import StatusClass
from .core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RISK_STATUSES = frozenset(
    {StatusClass.DEGRADED, StatusClass.OFFLINE, StatusClass.ALERT}
)

_FLOAT_FIELDS = (
    "radius",
    "grid_spacing",
    "inner_radius",
    "outer_radius",
    "outer_depth",
    "mesh_link_probability",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _status_collection(value: Any) -> tuple[Any, ...]:
    """Normalise a risk status setting; a bare string is one status."""
    if value is None:
        return ()
    if isinstance(value, (str, StatusClass)):
        return (value,)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigurationError(
            f"risk_statuses must be a list of statuses, got {value!r}"
        )
    return tuple(value)


@dataclass(frozen=True)
class LayoutConfig:
    """Tunable constants for position and edge computation.

    Parameters
    ----------
    radius:
        Circle radius for star and ring, sphere radius for mesh.
    grid_spacing:
        Distance between adjacent grid lattice points.
    inner_radius, outer_radius:
        Radii of the two hybrid tiers.
    outer_depth:
        Amplitude of the ``sin(i)`` z-offset given to hybrid outer nodes.
    mesh_link_probability:
        Probability that any given pair is linked in a mesh.
    risk_statuses:
        Device statuses that flag an edge as risky.
    max_devices_hint:
        Advisory device count; larger inputs are laid out but logged.
    """

    radius: float = 6.0
    grid_spacing: float = 4.0
    inner_radius: float = 3.0
    outer_radius: float = 7.0
    outer_depth: float = 4.0
    mesh_link_probability: float = 0.4
    risk_statuses: frozenset[StatusClass] = field(
        default=DEFAULT_RISK_STATUSES
    )
    max_devices_hint: int = 500

    def __post_init__(self) -> None:
        for name in _FLOAT_FIELDS:
            if not _is_number(getattr(self, name)):
                raise ConfigurationError(
                    f"{name} must be a number, got {getattr(self, name)!r}"
                )
        if not _is_number(self.max_devices_hint) or isinstance(self.max_devices_hint, float):
            raise ConfigurationError(
                f"max_devices_hint must be an integer, got {self.max_devices_hint!r}"
            )
        for name in ("radius", "grid_spacing", "inner_radius", "outer_radius"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value!r}")
        if self.outer_depth < 0:
            raise ConfigurationError(
                f"outer_depth must be non-negative, got {self.outer_depth!r}"
            )
        if not 0.0 <= self.mesh_link_probability <= 1.0:
            raise ConfigurationError(
                "mesh_link_probability must lie in [0, 1], "
                f"got {self.mesh_link_probability!r}"
            )
        if self.max_devices_hint < 0:
            raise ConfigurationError(
                f"max_devices_hint must be non-negative, got {self.max_devices_hint!r}"
            )
        raw = _status_collection(self.risk_statuses)
        try:
            statuses = frozenset(StatusClass(s) for s in raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid risk status: {e}") from e
        object.__setattr__(self, "risk_statuses", statuses)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> LayoutConfig:
        """Build a config from a plain dict, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown layout config keys: {', '.join(unknown)}"
            )
        kwargs = dict(data)
        if "risk_statuses" in kwargs:
            kwargs["risk_statuses"] = frozenset(
                _status_collection(kwargs["risk_statuses"])
            )
        return cls(**kwargs)

    def replace(self, **changes: Any) -> LayoutConfig:
        return dataclasses.replace(self, **changes)


def load_config(path: str) -> LayoutConfig:
    """Load a :class:`LayoutConfig` from a YAML file.

    The file holds either the config keys at top level or nested under a
    ``layout`` key.  An empty file yields the defaults.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or holds
            invalid values.
    """
    path = os.path.expanduser(path)

    if not os.path.isfile(path):
        raise ConfigurationError(f"Layout config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse layout config: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read layout config: {e}") from e

    if data is None:
        logger.warning(f"Layout config {path} is empty, using defaults")
        return LayoutConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Layout config must be a mapping, got {type(data).__name__}"
        )
    if "layout" in data:
        data = data["layout"] or {}
        if not isinstance(data, dict):
            raise ConfigurationError("'layout' section must be a mapping")

    logger.debug(f"Loaded layout config from {path}")
    return LayoutConfig.from_mapping(data)
