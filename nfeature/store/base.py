"""Backing store contract for normalized features.

A store persists features, hands out integer primary ids and turns ids back
into features in batches. Features keep only a weak reference to their store.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, TYPE_CHECKING
import logging

from nfeature.config import INDEX_SUBFEATURES
from nfeature.errors import StoreWriteError

if TYPE_CHECKING:
    from nfeature.feature import NormalizedFeature

logger = logging.getLogger(__name__)


class FeatureStore(ABC):
    """Abstract base class for feature stores."""

    def __init__(self, index_subfeatures: Optional[bool] = None, seqfeature_class=None):
        if index_subfeatures is None:
            index_subfeatures = INDEX_SUBFEATURES
        self._index_subfeatures = bool(index_subfeatures)
        self.seqfeature_class = seqfeature_class

    @abstractmethod
    def store(self, *features: 'NormalizedFeature') -> List[int]:
        """Store features so they can be searched for. Sets their primary ids."""
        pass

    @abstractmethod
    def store_noindex(self, *features: 'NormalizedFeature') -> List[int]:
        """Store features reachable only through their parents. Sets their primary ids."""
        pass

    @abstractmethod
    def fetch_many(self, ids: Iterable[int]) -> List['NormalizedFeature']:
        """Fetch features by primary id in one call. Unknown ids are left out."""
        pass

    def fetch(self, primary_id: int) -> Optional['NormalizedFeature']:
        found = self.fetch_many([primary_id])
        return found[0] if found else None

    def index_subfeatures(self, flag: Optional[bool] = None) -> bool:
        """Get the subfeature indexing policy, or set it and return the previous one."""
        previous = self._index_subfeatures
        if flag is not None:
            self._index_subfeatures = bool(flag)
        return previous

    def feature_class(self):
        if self.seqfeature_class is not None:
            return self.seqfeature_class
        from nfeature.feature import NormalizedFeature
        return NormalizedFeature

    def new_feature(self, **kwargs) -> 'NormalizedFeature':
        """Create a feature of this store's feature class and store it."""
        return self.feature_class()(store=self, **kwargs)


def write_features(store: FeatureStore, features: Sequence['NormalizedFeature'],
                   indexed: bool = True) -> List[int]:
    """Write features to a store in a single call.

    Raises:
        StoreWriteError: the store raised or reported nothing written
    """
    writer = store.store if indexed else store.store_noindex
    try:
        result = writer(*features)
    except StoreWriteError:
        raise
    except Exception as e:
        raise StoreWriteError(f"Couldn't store {len(features)} feature(s) in {store!r}: {e}") from e

    if not result:
        raise StoreWriteError(f"Couldn't store one or more of {len(features)} feature(s) in {store!r}")
    return result
