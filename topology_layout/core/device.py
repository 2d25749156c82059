"""Device model for topology layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StatusClass(str, Enum):
    """Health classification of a device.

    The layout engine never interprets the classification beyond checking
    membership in the configured risk set when tagging edges.
    """

    NOMINAL = "nominal"
    DEGRADED = "degraded"
    OFFLINE = "offline"
    ALERT = "alert"

    @classmethod
    def _missing_(cls, value: object) -> StatusClass | None:
        if isinstance(value, str):
            key = value.strip().lower()
            if key == "online":
                return cls.NOMINAL
            for member in cls:
                if member.value == key:
                    return member
        return None


@dataclass(frozen=True)
class Device:
    """A single device to be positioned.

    Only ``id`` and ``status`` are visible to the layout algorithms.  The
    ``name`` and ``attributes`` fields are carried for consumers (labels,
    addresses, traffic counters) and never read by the engine.
    """

    id: str
    status: StatusClass = StatusClass.NOMINAL
    name: str = ""
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", StatusClass(self.status))

    @classmethod
    def from_mapping(cls, record: dict[str, Any]) -> Device:
        """Build a device from a plain record such as a JSON object.

        ``id`` and ``status`` (default ``nominal``) are taken from the
        record; ``name`` is optional and every other key lands in
        ``attributes``.
        """
        data = dict(record)
        did = data.pop("id")
        status = data.pop("status", StatusClass.NOMINAL)
        name = data.pop("name", "")
        return cls(id=str(did), status=status, name=name, attributes=data)

    def is_flagged(self, risk_statuses: frozenset[StatusClass]) -> bool:
        return self.status in risk_statuses
