"""
Derivation refresh loop.

Recomputes every derived field after a change to the data bag and merges
the changed values back in as a new bag. Passes repeat until nothing
changes, so a field derived from another derived field picks up the new
value on the following pass. Fields that depend on themselves, directly
or through other fields, are pinned to None.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping

from form_engine.config import get_config
from form_engine.engine.derived import CustomComputationHook, compute_derived_value
from form_engine.engine.graph import DependencyGraph
from form_engine.models.field_definitions import FormField
from form_engine.models.form_data import FormData

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Outcome of one run of the refresh loop."""

    data: FormData
    passes: int = 0
    changed_fields: list[str] = field(default_factory=list)
    converged: bool = True
    cycle_fields: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changed_fields)


def default_max_passes(field_count: int) -> int:
    """One pass per field plus a final pass that confirms nothing changed."""
    configured = get_config().max_refresh_passes
    if configured > 0:
        return configured
    return max(field_count, 1) + 1


def _same_value(a: Any, b: Any) -> bool:
    # NaN never equals itself
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def refresh_derived_values(
    fields: Iterable[FormField],
    data: Mapping[str, Any],
    max_passes: int | None = None,
    today: date | None = None,
    custom_hook: CustomComputationHook | None = None,
) -> RefreshResult:
    """
    Bring every derived value in ``data`` up to date.

    ``data`` is never modified; the result carries a new bag. Fields still
    changing when the pass limit is reached keep their last computed value
    and ``converged`` is False.

    Args:
        fields: Fields of the schema.
        data: Current data bag.
        max_passes: Upper bound on passes; defaults to the field count plus one.
            At least one pass always runs.
        today: Reference date for ``age`` computations.
        custom_hook: Optional implementation of the ``custom`` computation.

    Returns:
        RefreshResult with the updated bag.
    """
    fields = list(fields)
    graph = DependencyGraph.from_fields(fields)
    cycle_fields = graph.cycle_members()
    if cycle_fields:
        logger.warning(
            f"Derived fields depend on themselves and will have no value: "
            f"{', '.join(sorted(cycle_fields))}"
        )

    by_id = {f.id: f for f in fields}
    order = graph.evaluation_order()
    if max_passes is None:
        max_passes = default_max_passes(len(fields))
    limit = max(max_passes, 1)

    current: FormData = dict(data)
    changed_fields: list[str] = []
    passes = 0
    converged = False

    # Cycle members never get computed
    pinned = {field_id: None for field_id in cycle_fields if current.get(field_id) is not None}
    if pinned:
        current = {**current, **pinned}
        changed_fields.extend(sorted(pinned))

    while passes < limit:
        passes += 1
        staged: dict[str, Any] = {}
        for field_id in order:
            new_value = compute_derived_value(by_id[field_id], current, today, custom_hook)
            if field_id not in current or not _same_value(new_value, current[field_id]):
                staged[field_id] = new_value

        if not staged:
            converged = True
            break

        current = {**current, **staged}
        for field_id in staged:
            if field_id not in changed_fields:
                changed_fields.append(field_id)

    if not converged:
        logger.warning(
            f"Derived values still changing after {passes} passes; keeping last computed values"
        )

    return RefreshResult(
        data=current,
        passes=passes,
        changed_fields=changed_fields,
        converged=converged,
        cycle_fields=sorted(cycle_fields),
    )


def initialize_form_data(
    fields: Iterable[FormField],
    today: date | None = None,
    custom_hook: CustomComputationHook | None = None,
) -> FormData:
    """Build the starting bag of a fill session from field defaults."""
    fields = list(fields)
    initial: FormData = {
        f.id: f.default_value for f in fields if f.default_value is not None
    }
    return refresh_derived_values(fields, initial, today=today, custom_hook=custom_hook).data
