"""
First-wins cross-reference map construction.

Collaborators stream records from a ``RecordReader`` and extract
``(key, value)`` identifier pairs from each one. ``build_xref_map`` inserts
them into a mapping with the following rules:

- A pair with a missing side (``None``) is ignored.
- The first value seen for a key is kept. A later, different value for the
  same key is never written; it is logged as a warning and recorded as an
  ``XrefConflict``.
- A later pair repeating the value already stored is counted as a
  duplicate but is not a conflict.

Maps built from separate shards (e.g. one file per worker) are combined
with ``merge_xref_results``, which applies the same first-wins rule in
argument order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Iterable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
R = TypeVar("R")


@dataclass(frozen=True)
class XrefConflict(Generic[K, V]):
    """A rejected value for a key that already had a different one."""
    key: K
    kept: V
    rejected: V
    line_number: int | None = None


@dataclass
class XrefResult(Generic[K, V]):
    """Output of a cross-reference build."""
    mapping: dict[K, V] = field(default_factory=dict)
    conflicts: list[XrefConflict[K, V]] = field(default_factory=list)
    duplicates: int = 0

    def add(self, key: K, value: V, line_number: int | None = None) -> bool:
        """Insert a pair under the first-wins rule; True if it was stored."""
        if key not in self.mapping:
            self.mapping[key] = value
            return True
        kept = self.mapping[key]
        if kept == value:
            self.duplicates += 1
            return False
        conflict = XrefConflict(key=key, kept=kept, rejected=value, line_number=line_number)
        self.conflicts.append(conflict)
        logger.warning(
            "Conflicting value for key %s (line %s): keeping %s, ignoring %s",
            key, line_number if line_number is not None else "?", kept, value,
        )
        return False

    def __len__(self) -> int:
        return len(self.mapping)


def build_xref_map(
    records: Iterable[R],
    extract: Callable[[R], Iterable[tuple[K | None, V | None]]],
) -> XrefResult[K, V]:
    """Build a first-wins mapping from a stream of records.

    Args:
        records: Typically a ``RecordReader``; consumed once.
        extract: Returns the ``(key, value)`` pairs contributed by one record.
            Either side may be ``None``, in which case the pair is ignored.

    Returns:
        An ``XrefResult`` with the mapping and any recorded conflicts.
    """
    result: XrefResult[K, V] = XrefResult()
    for record in records:
        line_number = getattr(record, "line_number", None)
        for key, value in extract(record):
            if key is None or value is None:
                continue
            result.add(key, value, line_number)
    logger.info(
        "Built cross-reference map: %d keys, %d conflicts, %d duplicates",
        len(result.mapping), len(result.conflicts), result.duplicates,
    )
    return result


def merge_xref_results(results: Iterable[XrefResult[K, V]]) -> XrefResult[K, V]:
    """Merge independently built maps, earliest shard first.

    Conflicts already recorded in the shards are carried over; new
    conflicts between shards are added.
    """
    merged: XrefResult[K, V] = XrefResult()
    for shard in results:
        merged.conflicts.extend(shard.conflicts)
        merged.duplicates += shard.duplicates
        for key, value in shard.mapping.items():
            merged.add(key, value)
    return merged
