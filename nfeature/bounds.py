"""Keeping a parent's extent and defaults in line with its subfeatures."""

import logging
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from nfeature.uobject.record import FeatureRecord

logger = logging.getLogger(__name__)


def extend_bounds(parent: 'FeatureRecord', children: Sequence['FeatureRecord']) -> None:
    """Grow the parent's [start, end] to cover the new children.

    Bounds never shrink. seq_id and strand are only filled in when unset,
    from the first child of this batch.
    """
    if not children:
        return

    starts = [c.start for c in children if c.start is not None]
    ends = [c.end for c in children if c.end is not None]

    if starts and (parent.start is None or min(starts) < parent.start):
        parent.start = min(starts)
    if ends and (parent.end is None or max(ends) > parent.end):
        parent.end = max(ends)

    first = children[0]
    if not parent.seq_id:
        parent.seq_id = first.seq_id
    if not parent.strand:
        parent.strand = first.strand

    logger.debug(f"bounds of {parent.short_repr()} after {len(children)} subfeatures")
