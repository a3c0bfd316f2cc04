"""Turning the many shapes a subfeature can be given in into features.

Subfeatures may be passed as features of the parent's own class, as
(start, stop) coordinate pairs, or as any object with the generic feature
interface. In normalized mode they are written to the parent's store and
referenced by primary id; otherwise they are embedded in the parent.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Tuple

from nfeature.bounds import extend_bounds
from nfeature.childref import child_ref
from nfeature.errors import ConfigurationError, InvalidChildError, NoIdentityError, StoreWriteError
from nfeature.store.base import write_features
from nfeature.uobject.record import SeqFeatureLike, Strand

if TYPE_CHECKING:
    from nfeature.feature import NormalizedFeature

logger = logging.getLogger(__name__)


def from_coordinates(parent: 'NormalizedFeature', start: int, stop: int) -> 'NormalizedFeature':
    """Make a subfeature of the parent's subtype from a coordinate pair."""
    strand = parent.strand
    if start > stop:
        start, stop = stop, start
        strand = Strand.REVERSE

    return type(parent)(
        start=start,
        end=stop,
        strand=strand,
        seq_id=parent.seq_id,
        primary_tag=parent.subtype or parent.primary_tag,
        display_name=parent.display_name,
        name_class=parent.name_class,
    )


def from_feature_like(parent: 'NormalizedFeature', seg: SeqFeatureLike) -> 'NormalizedFeature':
    """Copy a foreign feature into the parent's class, tags included."""
    feature = type(parent)(
        start=seg.start,
        end=seg.end,
        strand=seg.strand,
        seq_id=seg.seq_id,
        display_name=seg.display_name,
        primary_tag=seg.primary_tag,
        source_tag=seg.source_tag,
        score=getattr(seg, 'score', None),
    )
    for tag in seg.get_all_tags():
        feature.attributes[tag] = list(seg.get_tag_values(tag))
    return feature


def coordinate(value, seg) -> int:
    """Integer coordinate from a pair member. Fractional values are rejected."""
    try:
        coord = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidChildError(f"Coordinate pair {seg!r} has a non-integer coordinate {value!r}") from e
    if not isinstance(value, str) and coord != value:
        raise InvalidChildError(f"Coordinate pair {seg!r} has a non-integer coordinate {value!r}")
    return coord


def create_subfeatures(parent: 'NormalizedFeature', segments: Iterable[Any]
                       ) -> Tuple[List['NormalizedFeature'], List['NormalizedFeature']]:
    """Convert raw subfeature arguments into features of the parent's class.

    Nothing is modified here.

    Returns:
        (all candidates, the ones that were already features of the parent's class)

    Raises:
        InvalidChildError: an argument has none of the accepted shapes
    """
    candidates = []
    reused = []

    for seg in segments:
        if isinstance(seg, type(parent)):
            candidates.append(seg)
            reused.append(seg)

        elif isinstance(seg, (tuple, list)):
            if len(seg) != 2:
                raise InvalidChildError(f"Coordinate pairs need exactly two values, got {seg!r}")
            start, stop = seg
            if start is None or stop is None:
                logger.debug(f"skipping incomplete coordinate pair {seg!r}")
                continue
            candidates.append(from_coordinates(parent, coordinate(start, seg), coordinate(stop, seg)))

        elif isinstance(seg, SeqFeatureLike):
            candidates.append(from_feature_like(parent, seg))

        else:
            raise InvalidChildError(f"{seg!r} is neither a feature nor a (start, stop) pair")

    return candidates, reused


def add_subfeatures(parent: 'NormalizedFeature', segments: Iterable[Any],
                    normalized: bool) -> List['NormalizedFeature']:
    """
    Add subfeatures to a parent feature.

    Normalized subfeatures that are not yet in the parent's store are
    written there in one batch, using store() or store_noindex() as the
    store's subfeature indexing policy says, and referenced by id.
    Unnormalized ones are embedded. The parent's bounds are then extended
    and, if the parent is persisted, it is written back. If any step fails
    the parent is left as it was.

    Args:
        parent: Feature receiving the subfeatures
        segments: Features, feature-like objects or (start, stop) pairs
        normalized: Reference subfeatures by primary id instead of embedding them

    Returns:
        The subfeatures that were added, as features of the parent's class

    Raises:
        ConfigurationError: normalized add on a parent without a store
        InvalidChildError: unrecognized subfeature argument
        StoreWriteError: the batch write or the parent's write-back failed
        NoIdentityError: a stored subfeature came back without a primary id
    """
    store = parent.object_store
    if normalized and store is None:
        raise ConfigurationError(
            f"{parent.short_repr()} must be associated with a feature store before "
            "normalized subfeatures can be added")

    candidates, reused = create_subfeatures(parent, segments)
    if not candidates:
        return []

    if normalized:
        need_loading = [seg for seg in candidates
                        if seg.primary_id is None or seg.object_store is not store]
        if need_loading:
            indexed = store.index_subfeatures()
            logger.debug(f"storing {len(need_loading)} of {len(candidates)} subfeature(s), indexed={indexed}")
            write_features(store, need_loading, indexed=indexed)

    refs = []
    for seg in candidates:
        if normalized and seg.primary_id is None:
            raise NoIdentityError(f"No primary id for stored subfeature {seg.short_repr()}")
        refs.append(child_ref(seg, normalized))

    saved = (list(parent.children), parent.start, parent.end, parent.seq_id, parent.strand)

    parent.children.extend(refs)
    extend_bounds(parent, candidates)

    if parent.primary_id is not None:
        try:
            parent.update()
        except StoreWriteError:
            parent.children, parent.start, parent.end, parent.seq_id, parent.strand = saved
            raise

    if not normalized:
        # embedded subfeatures must not resolve anything lazily
        for seg in reused:
            seg.primary_id = None
            seg.object_store = None

    return candidates
