"""Materializing a feature's subfeatures.

Stored subfeatures are fetched with one fetch_many() call per lookup, and
the result is merged back with the embedded subfeatures in insertion order.
Fetched features are not cached on the parent.
"""

import logging
from typing import TYPE_CHECKING, List, Sequence

from nfeature.childref import EmbeddedChild, StoredChild
from nfeature.errors import ConfigurationError

if TYPE_CHECKING:
    from nfeature.feature import NormalizedFeature

logger = logging.getLogger(__name__)


def resolve_children(parent: 'NormalizedFeature', types: Sequence[str] = ()) -> List['NormalizedFeature']:
    refs = parent.children
    if not refs:
        return []

    ids = list(dict.fromkeys(ref.primary_id for ref in refs if isinstance(ref, StoredChild)))

    fetched = {}
    if ids:
        store = parent.object_store
        if store is None:
            raise ConfigurationError(
                f"{parent.short_repr()} references {len(ids)} stored subfeature(s) but has no store")
        for feature in store.fetch_many(ids):
            fetched[feature.primary_id] = feature
        logger.debug(f"resolved {len(fetched)} of {len(ids)} stored subfeature(s) in one fetch")

    resolved = []
    for ref in refs:
        if isinstance(ref, EmbeddedChild):
            resolved.append(ref.feature)
        elif ref.primary_id in fetched:
            resolved.append(fetched[ref.primary_id])
        else:
            logger.warning(f"subfeature {ref.primary_id} of {parent.short_repr()} is missing from the store")

    return [feature for feature in resolved if feature.type_match(*types)]
