from collections import Counter

import pytest

from nfeature import MemoryFeatureStore, NormalizedFeature


class CountingStore(MemoryFeatureStore):
    """MemoryFeatureStore that counts calls into the store contract."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = Counter()
        self.batches = []

    def store(self, *features):
        self.calls['store'] += 1
        self.batches.append(len(features))
        return super().store(*features)

    def store_noindex(self, *features):
        self.calls['store_noindex'] += 1
        self.batches.append(len(features))
        return super().store_noindex(*features)

    def fetch_many(self, ids):
        self.calls['fetch_many'] += 1
        return super().fetch_many(ids)


class FlakyStore(MemoryFeatureStore):
    """Store whose writes can be switched to fail in different ways.

    Modes: "raise", "empty" (no ids), "forgetful" (id 0), "rewrite" (fails
    only when a feature already in this store is written again), "commit"
    (records are written, then the commit fails).
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.mode = "ok"

    def _commit(self):
        if self.mode == "commit":
            raise RuntimeError("disk full")
        super()._commit()

    def _store(self, features, indexed):
        if self.mode == "raise":
            raise RuntimeError("disk full")
        if self.mode == "rewrite" and any(f.primary_id is not None and f.object_store is self
                                          for f in features):
            raise RuntimeError("disk full")
        if self.mode == "empty":
            return []
        if self.mode == "forgetful":
            return [0] * len(features)
        return super()._store(features, indexed)


@pytest.fixture
def db():
    return MemoryFeatureStore()


@pytest.fixture
def counting_db():
    return CountingStore()


@pytest.fixture
def flaky_db():
    return FlakyStore()


@pytest.fixture
def gene(db):
    return db.new_feature(primary_tag="gene", source_tag="wormbase", seq_id="chrIII",
                          start=1000, end=2000, strand="+", display_name="ZK909",
                          subtype="exon")


@pytest.fixture
def transient_gene():
    return NormalizedFeature(primary_tag="gene", seq_id="chrIII", start=1000, end=2000,
                             display_name="ZK909", subtype="exon")
