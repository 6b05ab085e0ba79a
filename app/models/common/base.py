"""Base entity for dataclasses stored or served as camelCase JSON."""

from dataclasses import dataclass, fields
from typing import Any


def camel(name: str) -> str:
    """read_time -> readTime"""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _json_value(value: Any) -> Any:
    if isinstance(value, BaseEntity):
        return value.to_json()
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    return value


@dataclass
class BaseEntity:
    """Base class for all entities."""

    def to_json(self, drop_none: bool = False) -> dict[str, Any]:
        """Fields keyed by camelCase name; nested entities are converted too."""
        data = {camel(f.name): _json_value(getattr(self, f.name)) for f in fields(self)}
        if drop_none:
            return {k: v for k, v in data.items() if v is not None}
        return data
