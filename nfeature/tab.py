
from typing import Iterable

from tabulate import tabulate

from nfeature.matching import feature_type

HEADERS = ["type", "name", "seq_id", "start", "end", "strand", "id"]


def _or_blank(value):
    return "" if value is None else value


def feature_rows(features: Iterable):
    rows = []
    for f in features:
        rows.append([feature_type(f.primary_tag, f.source_tag),
                     f.display_name or "",
                     f.seq_id, f.start, f.end, f.strand.symbol,
                     _or_blank(getattr(f, 'primary_id', None))])
    return rows


def format_features(features: Iterable, tablefmt: str = "simple") -> str:
    return tabulate(feature_rows(features), headers = HEADERS, tablefmt = tablefmt)


def print_features(features: Iterable, title: str = ""):

    if title:
        print(title)
    print(format_features(features))
    print()
