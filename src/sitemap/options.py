"""
Filter option index.

Derives the distinct, sorted tag values per attribute from the canonical
dataset. Typology options are restricted to a fixed vocabulary of recognized
terms; buildings keep their other typology tags, which still filter.
"""

from typing import Dict, List, Set

from .models import ATTRIBUTES, Dataset


ALLOWED_MORPHOLOGIES = frozenset({
    "prostyle", "amphiprostyle", "pseudoperipteral", "peripteral", "dipteral",
    "pseudodipteral", "distyle in antis", "tetrastyle", "hexastyle",
    "octastyle", "nonastyle", "peristyle", "linear", "U-shape", "L-shape",
})


def build_option_index(dataset: Dataset) -> Dict[str, List[str]]:
    """
    Collect filter options for every attribute.

    Args:
        dataset: Canonical dataset

    Returns:
        Dict of attribute -> lexicographically sorted distinct values
    """
    values: Dict[str, Set[str]] = {attr: set() for attr in ATTRIBUTES}
    for site in dataset:
        for building in site.buildings:
            for attr in ATTRIBUTES:
                values[attr].update(building.tags(attr))

    values["morphology"] &= ALLOWED_MORPHOLOGIES
    return {attr: sorted(values[attr]) for attr in ATTRIBUTES}
