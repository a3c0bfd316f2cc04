"""References from a parent feature to its subfeatures.

A subfeature is either embedded (the parent owns the object) or stored
(the parent keeps only the primary id the store assigned).
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from nfeature.feature import NormalizedFeature


@dataclass(frozen=True)
class EmbeddedChild:
    feature: 'NormalizedFeature'


@dataclass(frozen=True)
class StoredChild:
    primary_id: int


ChildRef = Union[EmbeddedChild, StoredChild]


def child_ref(feature: 'NormalizedFeature', normalized: bool) -> ChildRef:
    if normalized:
        return StoredChild(feature.primary_id)
    return EmbeddedChild(feature)
