"""Feature store persisted to a JSON file."""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from nfeature.config import JSON_INDENT
from nfeature.errors import StoreWriteError
from nfeature.store.memory import MemoryFeatureStore

logger = logging.getLogger(__name__)


class JSONFeatureStore(MemoryFeatureStore):
    """
    MemoryFeatureStore that rewrites a JSON document after every write.

    File layout:
        {"next_id": 4, "index_subfeatures": true, "indexed": [1],
         "features": {"1": {...record...}, ...}}

    Args:
        path: JSON file; loaded if it exists
        index_subfeatures: policy for new files, None for the configured default
    """

    def __init__(self, path: Union[str, Path], index_subfeatures: Optional[bool] = None,
                 seqfeature_class=None):
        super().__init__(index_subfeatures, seqfeature_class)
        self.path = Path(path)
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        with open(self.path) as f:
            data = json.load(f)

        self._records = {int(k): v for k, v in data.get("features", {}).items()}
        self._indexed = set(data.get("indexed", []))
        self._next_id = data.get("next_id", max(self._records, default=0) + 1)
        self._index_subfeatures = bool(data.get("index_subfeatures", self._index_subfeatures))
        logger.info(f"Loaded {len(self._records)} features from {self.path}")

    def _commit(self) -> None:
        data = {
            "next_id": self._next_id,
            "index_subfeatures": self._index_subfeatures,
            "indexed": sorted(self._indexed),
            "features": {str(k): v for k, v in self._records.items()},
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(data, f, indent=JSON_INDENT)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StoreWriteError(f"Failed to write {self.path}: {e}") from e

    def index_subfeatures(self, flag: Optional[bool] = None) -> bool:
        previous = super().index_subfeatures(flag)
        if flag is not None:
            self._commit()
        return previous

    def __repr__(self):
        return f"{type(self).__name__}({str(self.path)!r}, {len(self)} features)"
