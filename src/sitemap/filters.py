"""
Filter state and the filter engine.

A building passes when, for every attribute with selected values, at least
one of its own tags is selected (OR within an attribute, AND across
attributes), and, when a period is selected, its age tags intersect the
period's tags. Sites keep only passing buildings; sites left with none are
dropped. The engine never mutates its inputs.
"""

from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, Optional

from .models import ATTRIBUTES, Building, Dataset, Site
from .periods import PERIOD_TABLE, PeriodTable


def _check_attribute(attribute: str) -> None:
    if attribute not in ATTRIBUTES:
        raise ValueError(f"Unknown attribute: {attribute}")


@dataclass(frozen=True)
class FilterState:
    """Selected values per attribute plus an optional period id.

    An empty value set places no constraint on its attribute.
    """
    order: FrozenSet[str] = frozenset()
    morphology: FrozenSet[str] = frozenset()
    age: FrozenSet[str] = frozenset()
    date: FrozenSet[str] = frozenset()
    period_id: Optional[str] = None

    def values(self, attribute: str) -> FrozenSet[str]:
        _check_attribute(attribute)
        return getattr(self, attribute)

    def toggle(self, attribute: str, value: str) -> "FilterState":
        """Return a new state with value added to or removed from attribute."""
        current = self.values(attribute)
        return replace(self, **{attribute: current ^ {value}})

    def with_period(self, period_id: Optional[str]) -> "FilterState":
        return replace(self, period_id=period_id)

    def cleared(self) -> "FilterState":
        return FilterState()

    def is_empty(self) -> bool:
        return self.period_id is None and not any(self.values(a) for a in ATTRIBUTES)

    def to_dict(self) -> Dict[str, object]:
        result: Dict[str, object] = {attr: sorted(self.values(attr)) for attr in ATTRIBUTES}
        result["period_id"] = self.period_id
        return result


def building_matches(
    building: Building,
    state: FilterState,
    period_tags: Optional[FrozenSet[str]] = None,
) -> bool:
    for attr in ATTRIBUTES:
        selected = state.values(attr)
        if selected and selected.isdisjoint(building.tags(attr)):
            return False
    if period_tags is not None and period_tags.isdisjoint(building.age):
        return False
    return True


def apply_filters(
    dataset: Dataset,
    state: FilterState,
    periods: PeriodTable = PERIOD_TABLE,
) -> Dataset:
    """
    Derive the filtered dataset.

    Args:
        dataset: Canonical dataset
        state: Current filter state
        periods: Period table used to resolve state.period_id

    Returns:
        Sites with at least one matching building, each carrying only its
        matching buildings, in input order

    Raises:
        InvalidPeriod: If state.period_id is not in the period table
    """
    period_tags = periods.tags_of(state.period_id) if state.period_id is not None else None

    derived: List[Site] = []
    for site in dataset:
        kept = tuple(b for b in site.buildings if building_matches(b, state, period_tags))
        if not kept:
            continue
        if len(kept) == len(site.buildings):
            derived.append(site)
        else:
            derived.append(replace(site, buildings=kept))
    return tuple(derived)
