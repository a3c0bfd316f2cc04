"""Normalized features for use with a feature store.

A NormalizedFeature keeps its subfeatures either embedded in itself or as
primary ids into the store it belongs to, and fetches the latter in a
single batch when they are asked for.

Usage:
    db = MemoryFeatureStore()
    gene = db.new_feature(primary_tag="gene", seq_id="chr3", start=10000, end=11000)
    gene.add_seq_feature(db.new_feature(primary_tag="exon", seq_id="chr3",
                                        start=5000, end=5551, index=False))
    exons = gene.get_seq_features("exon")
"""

import copy
import logging
import weakref
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

from nfeature.childref import EmbeddedChild, StoredChild
from nfeature.config import LABEL_STYLE
from nfeature.errors import MethodNotFoundError
from nfeature.labels import LabelStyle, format_label
from nfeature.matching import type_match
from nfeature.normalize import add_subfeatures
from nfeature.resolve import resolve_children
from nfeature.segment import Segment
from nfeature.store.base import write_features
from nfeature.tab import format_features
from nfeature.uobject.record import FeatureRecord

if TYPE_CHECKING:
    from nfeature.store.base import FeatureStore

logger = logging.getLogger(__name__)


class NormalizedFeature(FeatureRecord):
    """
    Hierarchical feature whose subfeatures may live in a feature store.

    Args:
        data: Flat dict of record fields
        store: Store to persist this feature in right away (kept as a weak reference)
        index: Use store.store() (searchable) rather than store.store_noindex()
        segments: Initial subfeatures, embedded
        subtype: Type given to subfeatures made from coordinate pairs
        label_style: LabelStyle for to_display_string(), default from config
        primary_id: Id of an already persisted feature
        **kwargs: Record fields and aliases, see FeatureRecord
    """

    _state_fields = frozenset({'primary_id', 'children', 'subtype', 'label_style'})

    __slots__ = ('primary_id', 'children', 'subtype', 'label_style', '_store_ref')

    # mutable, so equal features must not share a hash
    __hash__ = None

    # names dispatch() resolves before falling back to subfeature types
    _accessors = frozenset({
        'seq_id', 'start', 'end', 'strand', 'primary_tag', 'source_tag', 'display_name',
        'name_class', 'score', 'phase', 'description', 'primary_id', 'subtype',
        'length', 'location', 'object_store',
        'label', 'load_id', 'target', 'segment', 'update', 'type_match',
        'get_seq_features', 'get_all_seq_features', 'segments', 'children_of',
        'get_all_tags', 'get_tag_values', 'has_tag',
    })

    def __init__(self, data: Optional[Dict[str, Any]] = None,
                 store: Optional['FeatureStore'] = None,
                 index: bool = True,
                 segments: Iterable[Any] = (),
                 subtype: Optional[str] = None,
                 label_style=None,
                 primary_id: Optional[int] = None,
                 **kwargs):
        super().__init__(data, **kwargs)

        self.primary_id = primary_id
        self.children = []
        self.subtype = subtype
        self.label_style = LabelStyle.coerce(label_style or LABEL_STYLE)
        self._store_ref = None

        if segments:
            self.add_segment(*segments)

        if store is not None:
            write_features(store, [self], indexed=index)  # sets primary_id
            self.object_store = store

    @classmethod
    def from_record(cls, record: Dict[str, Any], store: Optional['FeatureStore'] = None,
                    primary_id: Optional[int] = None) -> 'NormalizedFeature':
        """Rebuild a feature from a store record without writing it anywhere."""
        record = copy.deepcopy(record)
        children = record.pop('children', [])

        feature = cls(**record)
        for child in children:
            if 'id' in child:
                feature.children.append(StoredChild(child['id']))
            else:
                feature.children.append(EmbeddedChild(cls.from_record(child['feature'])))

        feature.primary_id = primary_id
        feature.object_store = store
        return feature

    def to_record(self) -> Dict[str, Any]:
        """Plain, JSON-compatible form of this feature as a store keeps it."""
        record = self.get_core_fields()
        record['strand'] = int(self.strand)
        record['subtype'] = self.subtype
        record['attributes'] = {tag: list(values) for tag, values in self.attributes.items()}

        children = []
        for ref in self.children:
            if isinstance(ref, StoredChild):
                children.append({'id': ref.primary_id})
            else:
                children.append({'feature': ref.feature.to_record()})
        record['children'] = children
        return record

    @property
    def object_store(self) -> Optional['FeatureStore']:
        """The store this feature belongs to, if it is still alive."""
        if self._store_ref is None:
            return None
        return self._store_ref()

    @object_store.setter
    def object_store(self, store: Optional['FeatureStore']) -> None:
        self._store_ref = weakref.ref(store) if store is not None else None

    # subfeatures

    def add_seq_feature(self, *segments) -> List['NormalizedFeature']:
        """Add subfeatures by storing them and keeping their primary ids."""
        return add_subfeatures(self, segments, normalized=True)

    def add_segment(self, *segments) -> List['NormalizedFeature']:
        """Add subfeatures embedded in this feature, with no identity of their own."""
        return add_subfeatures(self, segments, normalized=False)

    def get_seq_features(self, *types: str) -> List['NormalizedFeature']:
        """
        Return subfeatures, optionally only those matching type filters.

        Stored subfeatures are fetched in one batch; order is insertion order.

        Args:
            *types: "method" or "method:source" filters, case-insensitive
        """
        return resolve_children(self, types)

    def segments(self, *types: str) -> List['NormalizedFeature']:
        return self.get_seq_features(*types)

    get_all_seq_features = segments

    def children_of(self, type_name: str) -> List['NormalizedFeature']:
        """Subfeatures of one type, e.g. feature.children_of("Exon")."""
        return self.get_seq_features(type_name)

    def dispatch(self, name: str, *args):
        """
        Call an accessor by name.

        Known accessors are called (or read). Unknown names starting with an
        uppercase letter are subfeature types.

        Raises:
            MethodNotFoundError: unknown lowercase name
        """
        if name in self._accessors:
            value = getattr(self, name)
            return value(*args) if callable(value) else value
        if name[:1].isupper():
            return self.children_of(name)
        raise MethodNotFoundError(f"Can't locate method {name!r} via {type(self).__name__}")

    def update(self):
        """Write this feature back to its store. No-op if it was never stored."""
        store = self.object_store
        if self.primary_id is None or store is None:
            return None
        logger.debug(f"updating {self.label()}")
        return write_features(store, [self], indexed=True)

    # identity and display

    def type_match(self, *types: str) -> bool:
        return type_match(self.primary_tag, self.source_tag, types)

    def load_id(self) -> Optional[str]:
        values = self.get_tag_values('load_id')
        return values[0] if values else None

    def label(self) -> str:
        return format_label(self.primary_tag, self.source_tag, self.display_name,
                            self.load_id(), self.primary_id)

    def to_display_string(self, style=None) -> str:
        style = LabelStyle.coerce(style) if style is not None else self.label_style
        if style is LabelStyle.RAW:
            return object.__repr__(self)
        return self.label()

    def target(self) -> List[Segment]:
        """Segments named by the Target attribute(s)."""
        store = self.object_store
        return [Segment.from_target(t, store) for t in self.get_tag_values('Target')]

    def segment(self) -> Segment:
        """Segment covering this feature."""
        store = self.object_store
        return Segment(self.seq_id, self.start, self.end, self.strand,
                       weakref.ref(store) if store is not None else None)

    def summary(self, *types: str) -> str:
        """Table of this feature and its subfeatures."""
        return format_features([self] + self.get_seq_features(*types))

    def __repr__(self) -> str:
        parts = [f"{type(self).__name__}({self.label()}, {self.location}"]
        if self.strand:
            parts.append(f", strand={self.strand.symbol!r}")
        if self.children:
            parts.append(f", {len(self.children)} subfeatures")
        parts.append(")")
        return "".join(parts)
