"""Human-readable labels for features."""

from enum import Enum
from typing import Optional

from nfeature.matching import feature_type


class LabelStyle(Enum):
    NAMED = "named"   # "method:source(name)"
    RAW = "raw"       # default object repr

    @classmethod
    def coerce(cls, value) -> 'LabelStyle':
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


def display_name_for(display_name: Optional[str], load_id: Optional[str],
                     primary_id: Optional[int]) -> str:
    return display_name or load_id or f"id={primary_id if primary_id is not None else ''}"


def format_label(primary_tag: str, source_tag: str, display_name: Optional[str],
                 load_id: Optional[str] = None, primary_id: Optional[int] = None) -> str:
    """
    Build "method(name)" or "method:source(name)".

    The name falls back from the display name to the load_id attribute
    and finally to "id=<primary id>".
    """
    name = display_name_for(display_name, load_id, primary_id)
    return f"{feature_type(primary_tag, source_tag)}({name})"
