
import weakref
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from nfeature.uobject.record import Strand

if TYPE_CHECKING:
    from nfeature.store.base import FeatureStore


@dataclass
class Segment:
    """A stretch of a reference sequence, optionally tied to a store.

    Used for Target attributes and for a feature's own extent. The store is
    held weakly.
    """
    seq_id: str
    start: int
    end: int
    strand: Strand = Strand.FORWARD
    _store_ref: Optional[weakref.ref] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_target(cls, target: str, store: Optional['FeatureStore'] = None) -> 'Segment':
        """Parse a Target value: "seqid start end [strand]"."""
        parts = target.split()
        seq_id, start, end = parts[0], int(parts[1]), int(parts[2])
        strand = Strand.coerce(parts[3]) if len(parts) > 3 else Strand.FORWARD
        return cls(seq_id, start, end, strand or Strand.FORWARD,
                   weakref.ref(store) if store is not None else None)

    @property
    def store(self) -> Optional['FeatureStore']:
        return self._store_ref() if self._store_ref is not None else None

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def __str__(self):
        return f"{self.seq_id}:{self.start}..{self.end}"
