
from enum import IntEnum
from typing import Dict, Any, List, Optional, Protocol, runtime_checkable

from nfeature.uobject.uobject import UObject


class Strand(IntEnum):
    """Feature strand. UNKNOWN is falsy so it can be defaulted from children."""
    REVERSE = -1
    UNKNOWN = 0
    FORWARD = 1

    @classmethod
    def coerce(cls, value) -> 'Strand':
        if value is None or value == "":
            return cls.UNKNOWN
        if isinstance(value, str):
            return _strand_symbols.get(value.strip(), cls.UNKNOWN)
        if value > 0:
            return cls.FORWARD
        if value < 0:
            return cls.REVERSE
        return cls.UNKNOWN

    @property
    def symbol(self) -> str:
        return {1: '+', -1: '-', 0: '.'}[self.value]


_strand_symbols = {
    '+': Strand.FORWARD, '+1': Strand.FORWARD, '1': Strand.FORWARD,
    '-': Strand.REVERSE, '-1': Strand.REVERSE,
    '.': Strand.UNKNOWN, '0': Strand.UNKNOWN, '?': Strand.UNKNOWN,
}


@runtime_checkable
class SeqFeatureLike(Protocol):
    """What a foreign object must expose to be copied in as a subfeature."""
    seq_id: Any
    start: Any
    end: Any
    strand: Any
    primary_tag: Any
    source_tag: Any
    display_name: Any

    def get_all_tags(self) -> List[str]: ...

    def get_tag_values(self, tag: str) -> List[Any]: ...


def _to_int(value):
    if value is None or value == "":
        return None
    return int(value)


class FeatureRecord(UObject):
    """
    Common representation for a located genomic feature.

    Holds the reference sequence, coordinates, strand, type and source
    tags plus an ordered multi-valued tag map. Hierarchy lives in
    subclasses.

    Constructor aliases:
        id, seqname, display_id, name -> display_name
        stop -> end, type -> primary_tag, source -> source_tag
        ref, seqid -> seq_id, desc -> description, class -> name_class
    """

    _core_fields = frozenset({
        'seq_id', 'start', 'end', 'strand', 'primary_tag', 'source_tag',
        'display_name', 'name_class', 'score', 'phase', 'description'
    })

    _defaults = {
        'seq_id': None,
        'start': None,
        'end': None,
        'strand': Strand.UNKNOWN,
        'primary_tag': "",
        'source_tag': "",
        'display_name': None,
        'name_class': None,
        'score': None,
        'phase': None,
        'description': None,
    }

    _aliases = {
        'id': 'display_name',
        'seqname': 'display_name',
        'display_id': 'display_name',
        'name': 'display_name',
        'stop': 'end',
        'type': 'primary_tag',
        'source': 'source_tag',
        'ref': 'seq_id',
        'seqid': 'seq_id',
        'desc': 'description',
        'class': 'name_class',
    }

    __slots__ = ('seq_id', 'start', 'end', 'strand', 'primary_tag', 'source_tag',
                 'display_name', 'name_class', 'score', 'phase', 'description')

    _exported_properties = ('length', 'location')

    def __init__(self, data: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(data, **kwargs)

        start, end = _to_int(self.start), _to_int(self.end)
        strand = Strand.coerce(self.strand)
        if start is not None and end is not None and start > end:
            start, end = end, start
            strand = Strand.REVERSE

        object.__setattr__(self, 'start', start)
        object.__setattr__(self, 'end', end)
        object.__setattr__(self, 'strand', strand)
        if self.primary_tag is None:
            object.__setattr__(self, 'primary_tag', "")
        if self.source_tag is None:
            object.__setattr__(self, 'source_tag', "")

    @property
    def length(self):
        """Length of the feature in base pairs"""
        if self.start is None or self.end is None:
            return None
        return self.end - self.start + 1

    @property
    def location(self):
        return f"{self.seq_id}:{self.start}..{self.end}"

    def overlaps(self, start: int, end: int) -> bool:
        """Check if feature overlaps with given range."""
        return not (self.end < start or self.start > end)

    def contains(self, other: 'FeatureRecord') -> bool:
        return (self.seq_id == other.seq_id and
                self.start <= other.start and self.end >= other.end)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['strand'] = int(self.strand)
        return result

    def short_repr(self):
        """Ultra-compact representation"""
        parts = [f"{type(self).__name__}({self.primary_tag!r}, {self.location}"]

        if self.strand:
            parts.append(f", strand={self.strand.symbol!r}")
        if self.display_name:
            parts.append(f", name={self.display_name!r}")

        n_attrs = len(self.attributes)
        if n_attrs > 0:
            parts.append(f", +{n_attrs} attrs")

        parts.append(")")
        return "".join(parts)

    def __repr__(self) -> str:
        return self.short_repr()
