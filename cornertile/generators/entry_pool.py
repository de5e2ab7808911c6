"""
Runtime entry pool: configuration -> model variants.

Built once from a loaded tile set. Keys are exact configurations (records
with identical corners pool their models as variants); the pool keeps the
tile-set file order so that candidate iteration is reproducible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .corners import CORNER_COUNT, CornerConfiguration

logger = logging.getLogger(__name__)


@dataclass
class TilePrototype:
    """One authored configuration and the models that can render it.

    Attributes:
        configuration: Canonical corner labels of the authored model(s)
        models: Model references in file order; one is picked per position
    """
    configuration: CornerConfiguration
    models: List[str] = field(default_factory=list)

    @property
    def variant_count(self) -> int:
        return len(self.models)


class EntryPool:
    """Insertion-ordered prototype registry, bucketed by EMPTY corner count.

    Every symmetry transform preserves the number of EMPTY corners, and the
    match predicate never pairs EMPTY with a solid label, so a target can only
    match prototypes in its own bucket.
    """

    def __init__(self):
        self._prototypes: Dict[CornerConfiguration, TilePrototype] = {}
        self._buckets: Dict[int, List[TilePrototype]] = {}

    def add(self, configuration: CornerConfiguration, model_reference: str) -> TilePrototype:
        """Register a model for a configuration, creating the prototype if needed."""
        prototype = self._prototypes.get(configuration)
        if prototype is None:
            prototype = TilePrototype(configuration)
            self._prototypes[configuration] = prototype
            self._buckets.setdefault(configuration.empty_count, []).append(prototype)
        prototype.models.append(model_reference)
        return prototype

    def get(self, configuration: CornerConfiguration) -> TilePrototype:
        """Exact-key lookup.

        Raises:
            KeyError: If no prototype has exactly this configuration.
        """
        return self._prototypes[configuration]

    def candidates_for(self, target: CornerConfiguration) -> List[TilePrototype]:
        """Prototypes that could match target, in insertion order."""
        return list(self._buckets.get(target.empty_count, ()))

    def __contains__(self, configuration) -> bool:
        return configuration in self._prototypes

    def __iter__(self) -> Iterator[TilePrototype]:
        return iter(self._prototypes.values())

    def __len__(self) -> int:
        return len(self._prototypes)

    @property
    def model_count(self) -> int:
        return sum(p.variant_count for p in self._prototypes.values())

    def bucket_sizes(self) -> Dict[int, int]:
        return {k: len(v) for k, v in sorted(self._buckets.items())}


def _record_fields(record: Any) -> Tuple[CornerConfiguration, str]:
    """Accept TilePrefab-like objects or (corners, model_path) pairs."""
    if hasattr(record, "corners") and hasattr(record, "model_path"):
        corners, model_path = record.corners, record.model_path
    else:
        corners, model_path = record

    if not isinstance(corners, CornerConfiguration):
        values = list(corners)
        if len(values) != CORNER_COUNT:
            raise ValueError(f"Expected {CORNER_COUNT} corners, got {len(values)}")
        corners = CornerConfiguration.from_packed(values)
    return corners, str(model_path)


def convert_to_entry_pool(records: Iterable[Any]) -> EntryPool:
    """Build an EntryPool from tile-set records.

    Records sharing identical corners contribute variants to one prototype.

    Args:
        records: TilePrefab-like objects (``.corners``, ``.model_path``) or
            ``(corners, model_path)`` pairs, corners either a
            CornerConfiguration or eight packed bytes

    Returns:
        The populated pool.
    """
    pool = EntryPool()
    record_count = 0
    for record in records:
        configuration, model_reference = _record_fields(record)
        pool.add(configuration, model_reference)
        record_count += 1

    logger.info(
        "Entry pool: %d records -> %d prototypes (%d models)",
        record_count, len(pool), pool.model_count,
    )
    logger.debug("Entry pool buckets by empty count: %s", pool.bucket_sizes())
    return pool
