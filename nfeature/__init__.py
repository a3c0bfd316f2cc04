
"""Normalized genomic features.

Hierarchical feature records whose subfeatures are either embedded or kept
in a feature store and referenced by primary id, fetched in batches when
they are asked for.
"""

import logging

from nfeature.config import get_config, LOG_LEVEL
from nfeature.errors import (NFeatureError, ConfigurationError, InvalidChildError,
                             StoreWriteError, NoIdentityError, MethodNotFoundError)
from nfeature.uobject.record import FeatureRecord, SeqFeatureLike, Strand
from nfeature.childref import ChildRef, EmbeddedChild, StoredChild
from nfeature.labels import LabelStyle
from nfeature.segment import Segment
from nfeature.feature import NormalizedFeature
from nfeature.store import FeatureStore, MemoryFeatureStore, JSONFeatureStore

__all__ = ['logger',
            'get_config',
            'NFeatureError', 'ConfigurationError', 'InvalidChildError', 'StoreWriteError',
            'NoIdentityError', 'MethodNotFoundError',
            'FeatureRecord', 'SeqFeatureLike', 'Strand', 'ChildRef', 'EmbeddedChild', 'StoredChild',
            'LabelStyle', 'Segment', 'NormalizedFeature',
            'FeatureStore', 'MemoryFeatureStore', 'JSONFeatureStore']

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)


# End of module
