"""
Site and building records for the archaeological site map.

Records are frozen dataclasses so the canonical dataset can be shared
freely once loaded. Ordered sequences are tuples; a dataset is a tuple of
sites in file order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


# Filterable attributes, in display order
ATTRIBUTES: Tuple[str, ...] = ("order", "morphology", "age", "date")

ATTRIBUTE_LABELS = {
    "order": "Order",
    "morphology": "Typology",
    "age": "Age",
    "date": "Date",
}


@dataclass(frozen=True)
class Building:
    doc_id: str
    id: str
    order: Tuple[str, ...] = ()
    morphology: Tuple[str, ...] = ()
    age: Tuple[str, ...] = ()
    date: Tuple[str, ...] = ()
    style_evidence: Tuple[str, ...] = ()
    date_evidence: Tuple[str, ...] = ()
    url: Optional[str] = None
    # Unrecognized properties, passed through untouched
    extra: Tuple[Tuple[str, Any], ...] = ()

    def tags(self, attribute: str) -> Tuple[str, ...]:
        """Return this building's tags for a filterable attribute."""
        if attribute not in ATTRIBUTES:
            raise ValueError(f"Unknown attribute: {attribute}")
        return getattr(self, attribute)

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = dict(self.extra)
        record.update({
            "doc_id": self.doc_id,
            "id": self.id,
            "order": list(self.order),
            "morphology": list(self.morphology),
            "age": list(self.age),
            "date": list(self.date),
            "style_evidence": list(self.style_evidence),
            "date_evidence": list(self.date_evidence),
            "url": self.url,
        })
        return record


@dataclass(frozen=True)
class Site:
    site: str
    # Point position as stored in the file (lon, lat and any extra axes)
    coordinates: Tuple[float, ...]
    buildings: Tuple[Building, ...] = ()
    extra: Tuple[Tuple[str, Any], ...] = ()
    # Feature-level members other than type, geometry and properties
    feature_extra: Tuple[Tuple[str, Any], ...] = ()

    def find_building(self, doc_id: str) -> Optional[Building]:
        for building in self.buildings:
            if building.doc_id == doc_id:
                return building
        return None

    def doc_ids(self) -> List[str]:
        return [b.doc_id for b in self.buildings]

    def to_feature(self) -> Dict[str, Any]:
        """Render the site as a GeoJSON Point feature."""
        properties: Dict[str, Any] = dict(self.extra)
        properties["site"] = self.site
        properties["buildings"] = [b.to_dict() for b in self.buildings]
        feature: Dict[str, Any] = dict(self.feature_extra)
        feature.update({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": list(self.coordinates)},
            "properties": properties,
        })
        return feature


Dataset = Tuple[Site, ...]


def find_site(dataset: Dataset, name: Optional[str]) -> Optional[Site]:
    """Look up a site by name; None if absent or name is None."""
    if name is None:
        return None
    for site in dataset:
        if site.site == name:
            return site
    return None


def count_buildings(dataset: Dataset) -> int:
    return sum(len(site.buildings) for site in dataset)


def to_feature_collection(dataset: Dataset) -> Dict[str, Any]:
    """
    Render a dataset as the GeoJSON FeatureCollection handed to the map surface.

    Args:
        dataset: Canonical or derived dataset

    Returns:
        FeatureCollection dictionary, one Point feature per site
    """
    return {
        "type": "FeatureCollection",
        "features": [site.to_feature() for site in dataset],
    }
