from nfeature.store.base import FeatureStore, write_features
from nfeature.store.memory import MemoryFeatureStore
from nfeature.store.jsonstore import JSONFeatureStore

__all__ = ['FeatureStore', 'write_features', 'MemoryFeatureStore', 'JSONFeatureStore']
