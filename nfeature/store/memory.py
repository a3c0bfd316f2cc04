"""In-process feature store.

Features are kept as plain records (dicts), so a fetched feature is a fresh
copy rather than the object that was stored.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from nfeature.store.base import FeatureStore
from nfeature.matching import type_match

logger = logging.getLogger(__name__)


class MemoryFeatureStore(FeatureStore):
    """Dict-backed store.

    Usage:
        db = MemoryFeatureStore()
        gene = db.new_feature(primary_tag="gene", seq_id="chr3", start=10000, end=11000)
        gene.add_seq_feature((10000, 10200), (10500, 11000))
        exons = gene.get_seq_features("exon")
    """

    def __init__(self, index_subfeatures: Optional[bool] = None, seqfeature_class=None):
        super().__init__(index_subfeatures, seqfeature_class)
        self._records: Dict[int, Dict[str, Any]] = {}
        self._indexed = set()
        self._next_id = 1

    def store(self, *features) -> List[int]:
        return self._store(features, indexed=True)

    def store_noindex(self, *features) -> List[int]:
        return self._store(features, indexed=False)

    def _store(self, features, indexed: bool) -> List[int]:
        """Write records, then commit. On failure the store and the features are left untouched."""
        next_id = self._next_id
        ids = []
        for feature in features:
            primary_id = feature.primary_id
            # ids from another store mean nothing here
            if primary_id is None or feature.object_store is not self:
                primary_id = self._allocate_id()
            ids.append(primary_id)

        saved = [(pid, self._records.get(pid), pid in self._indexed) for pid in ids]
        try:
            for feature, primary_id in zip(features, ids):
                self._records[primary_id] = feature.to_record()
                if indexed:
                    self._indexed.add(primary_id)
                else:
                    self._indexed.discard(primary_id)
            self._commit()
        except Exception:
            self._rollback(saved, next_id)
            raise

        for feature, primary_id in zip(features, ids):
            feature.primary_id = primary_id
            feature.object_store = self

        logger.info(f"stored {len(ids)} feature(s) ({'indexed' if indexed else 'not indexed'})")
        return ids

    def _rollback(self, saved, next_id: int) -> None:
        for primary_id, record, was_indexed in reversed(saved):
            if record is None:
                self._records.pop(primary_id, None)
            else:
                self._records[primary_id] = record
            if was_indexed:
                self._indexed.add(primary_id)
            else:
                self._indexed.discard(primary_id)
        self._next_id = next_id
        logger.warning(f"rolled back write of {len(saved)} feature(s)")

    def _allocate_id(self) -> int:
        primary_id = self._next_id
        self._next_id += 1
        return primary_id

    def _commit(self) -> None:
        """Hook for stores that persist their records."""
        pass

    def fetch_many(self, ids: Iterable[int]) -> List:
        ids = list(ids)
        features = []
        for primary_id in ids:
            record = self._records.get(primary_id)
            if record is None:
                logger.warning(f"no feature with primary id {primary_id}")
                continue
            features.append(self._thaw(primary_id, record))
        logger.debug(f"fetched {len(features)} of {len(ids)} feature(s)")
        return features

    def _thaw(self, primary_id: int, record: Dict[str, Any]):
        return self.feature_class().from_record(record, store=self, primary_id=primary_id)

    def is_indexed(self, primary_id: int) -> bool:
        return primary_id in self._indexed

    def get_features_by_name(self, name: str) -> List:
        """Indexed features whose display name or Alias matches, ignoring case."""
        name = name.lower()
        ids = []
        for primary_id in sorted(self._indexed):
            record = self._records[primary_id]
            names = [record.get('display_name')] + record.get('attributes', {}).get('Alias', [])
            if any(n is not None and str(n).lower() == name for n in names):
                ids.append(primary_id)
        return self.fetch_many(ids)

    def get_features_by_type(self, *types: str) -> List:
        """Indexed features matching "method" / "method:source" filters."""
        ids = [primary_id for primary_id in sorted(self._indexed)
               if type_match(self._records[primary_id].get('primary_tag'),
                             self._records[primary_id].get('source_tag'), types)]
        return self.fetch_many(ids)

    def __len__(self):
        return len(self._records)

    def __contains__(self, primary_id):
        return primary_id in self._records

    def __repr__(self):
        return f"{type(self).__name__}({len(self)} features, {len(self._indexed)} indexed)"
