"""
Read-only views for the site side panel, filter chips and timeline tooltip.
"""

from typing import Any, Dict, List, Optional, Tuple

from .filters import FilterState
from .models import ATTRIBUTE_LABELS, ATTRIBUTES, Dataset, find_site
from .periods import PeriodSegment

# Evidence sentences at or below this word count are not descriptive
MIN_DESCRIPTION_WORDS = 5
MAX_DESCRIPTION_CHARS = 180
MAX_EXCERPTS_PER_FIELD = 2


def attribute_label(attribute: str) -> str:
    try:
        return ATTRIBUTE_LABELS[attribute]
    except KeyError:
        raise ValueError(f"Unknown attribute: {attribute}")


def site_panel(canonical: Dataset, derived: Dataset, selected_site: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    List every building of the selected site, flagging those the filters hide.

    Args:
        canonical: Full dataset
        derived: Filtered dataset
        selected_site: Selected site name

    Returns:
        {"site": name, "buildings": [{"doc_id", "id", "visible"}, ...]}, or
        None when no site is selected or the filters removed it
    """
    shown = find_site(derived, selected_site)
    original = find_site(canonical, selected_site)
    if shown is None or original is None:
        return None

    visible = set(shown.doc_ids())
    return {
        "site": original.site,
        "buildings": [
            {"doc_id": b.doc_id, "id": b.id, "visible": b.doc_id in visible}
            for b in original.buildings
        ],
    }


def _excerpts(texts: Tuple[str, ...]) -> List[str]:
    long_enough = [t for t in texts if len(t.split()) > MIN_DESCRIPTION_WORDS]
    return [t[:MAX_DESCRIPTION_CHARS] + "…" for t in long_enough[:MAX_EXCERPTS_PER_FIELD]]


def building_detail(derived: Dataset, selected_site: Optional[str], doc_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Detail card for the selected building, or None if it is not visible."""
    site = find_site(derived, selected_site)
    if site is None or doc_id is None:
        return None
    building = site.find_building(doc_id)
    if building is None:
        return None

    attributes = [
        {"attribute": attr, "label": attribute_label(attr), "values": list(building.tags(attr))}
        for attr in ("order", "morphology", "age")
        if building.tags(attr)
    ]
    return {
        "site": site.site,
        "doc_id": building.doc_id,
        "id": building.id,
        "attributes": attributes,
        "date": ", ".join(building.date) if building.date else None,
        "url": building.url,
        "description": _excerpts(building.style_evidence) + _excerpts(building.date_evidence),
    }


def active_filter_chips(state: FilterState) -> List[Dict[str, str]]:
    return [
        {"attribute": attr, "value": value}
        for attr in ATTRIBUTES
        for value in sorted(state.values(attr))
    ]


def describe_segment(segment: PeriodSegment) -> Dict[str, str]:
    """Timeline tooltip text for a period segment."""
    return {"label": segment.label, "tags": ", ".join(segment.tags)}
