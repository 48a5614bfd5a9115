"""The cat record and validation of its descriptive fields."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from gatos.errors import ValidationError

# Attribute fields in column order (the id column precedes them).
FIELDS = ("name", "image", "description", "gender", "observations")


@dataclass(frozen=True)
class Record:
    """One cat. ``id`` is assigned by the store and never changes."""

    id: int
    name: str
    image: str
    description: str
    gender: str
    observations: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def validate_fields(fields: Mapping[str, Any]) -> dict[str, str]:
    """Return the five attribute fields, or raise if any is missing or blank.

    Keys other than the five attribute names (including ``id``) are ignored.
    Values are returned exactly as given; only the emptiness check trims.
    """
    invalid = [
        name
        for name in FIELDS
        if not isinstance(fields.get(name), str) or not fields[name].strip()
    ]
    if invalid:
        raise ValidationError(invalid)
    return {name: fields[name] for name in FIELDS}
