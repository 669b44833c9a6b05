"""
Record sanitizer for the raw site GeoJSON.

Validates the payload shape against a JSON schema, then builds the canonical
dataset: per building, every attribute tag list is stripped of empty values,
"undetermined" placeholders and the <NA> missing-value marker. The raw
payload is never mutated; a malformed payload raises LoadFailure and nothing
is published.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import jsonschema

from .models import ATTRIBUTES, Building, Dataset, Site, count_buildings

logger = logging.getLogger(__name__)


MISSING_VALUE_MARKER = "<NA>"
UNDETERMINED = "undetermined"

_TAG_LIST = {"type": ["array", "null"], "items": {"type": ["string", "null"]}}

SITES_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["features"],
    "properties": {
        "type": {"const": "FeatureCollection"},
        "features": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["geometry", "properties"],
                "properties": {
                    "geometry": {
                        "type": "object",
                        "required": ["type", "coordinates"],
                        "properties": {
                            "type": {"const": "Point"},
                            "coordinates": {
                                "type": "array",
                                "minItems": 2,
                                "items": {"type": "number"},
                            },
                        },
                    },
                    "properties": {
                        "type": "object",
                        "required": ["site", "buildings"],
                        "properties": {
                            "site": {"type": "string", "minLength": 1},
                            "buildings": {
                                "type": "array",
                                "items": {
                                    "type": "object",
                                    "required": ["doc_id"],
                                    "properties": {
                                        "doc_id": {"type": ["string", "integer"]},
                                        "id": {"type": ["string", "integer", "null"]},
                                        "order": _TAG_LIST,
                                        "morphology": _TAG_LIST,
                                        "age": _TAG_LIST,
                                        "date": _TAG_LIST,
                                        "style_evidence": _TAG_LIST,
                                        "date_evidence": _TAG_LIST,
                                        "url": {"type": ["string", "null"]},
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
    },
}

_BUILDING_FIELDS = set(ATTRIBUTES) | {"doc_id", "id", "style_evidence", "date_evidence", "url"}
_SITE_FIELDS = {"site", "buildings"}
_FEATURE_FIELDS = {"type", "geometry", "properties"}


class LoadFailure(Exception):
    """Raised when the site dataset cannot be read or has an invalid shape."""
    pass


def is_valid_tag(value: Optional[str]) -> bool:
    """True if a tag carries information (not empty, undetermined or <NA>)."""
    if not value:
        return False
    if value.lower() == UNDETERMINED:
        return False
    return value != MISSING_VALUE_MARKER


def sanitize_tags(values: Optional[Iterable[Optional[str]]]) -> Tuple[str, ...]:
    if values is None:
        return ()
    return tuple(v for v in values if is_valid_tag(v))


def _text_list(values: Optional[Iterable[Optional[str]]]) -> Tuple[str, ...]:
    if values is None:
        return ()
    return tuple(v for v in values if v is not None)


def sanitize_building(record: Dict[str, Any]) -> Building:
    """
    Build a sanitized Building from one raw building record.

    Attribute tag lists are filtered; evidence lists lose null entries only;
    every other field passes through unchanged.
    """
    doc_id = str(record["doc_id"])
    label = record.get("id")
    return Building(
        doc_id=doc_id,
        id=str(label) if label is not None else doc_id,
        order=sanitize_tags(record.get("order")),
        morphology=sanitize_tags(record.get("morphology")),
        age=sanitize_tags(record.get("age")),
        date=sanitize_tags(record.get("date")),
        style_evidence=_text_list(record.get("style_evidence")),
        date_evidence=_text_list(record.get("date_evidence")),
        url=record.get("url"),
        extra=tuple((k, v) for k, v in record.items() if k not in _BUILDING_FIELDS),
    )


def _schema_error_message(error: jsonschema.ValidationError) -> str:
    path = ".".join(str(p) for p in error.absolute_path)
    if path:
        return f"Invalid dataset at '{path}': {error.message}"
    return f"Invalid dataset: {error.message}"


def validate_payload(raw: Any) -> None:
    """
    Validate the raw FeatureCollection shape and identity constraints.

    Raises:
        LoadFailure: On schema violations, duplicate site names or
            duplicate building doc_ids
    """
    try:
        jsonschema.validate(raw, SITES_SCHEMA)
    except jsonschema.ValidationError as e:
        raise LoadFailure(_schema_error_message(e))

    site_names: Set[str] = set()
    doc_ids: Set[str] = set()
    for feature in raw["features"]:
        props = feature["properties"]
        name = props["site"]
        if name in site_names:
            raise LoadFailure(f"Duplicate site: {name}")
        site_names.add(name)

        coordinates = feature["geometry"]["coordinates"]
        if not all(math.isfinite(c) for c in coordinates):
            raise LoadFailure(f"Non-finite coordinates for site {name}: {coordinates}")

        for building in props["buildings"]:
            doc_id = str(building["doc_id"])
            if doc_id in doc_ids:
                raise LoadFailure(f"Duplicate doc_id: {doc_id} (site {name})")
            doc_ids.add(doc_id)


def sanitize_dataset(raw: Any) -> Dataset:
    """
    Validate and sanitize a raw FeatureCollection into the canonical dataset.

    Args:
        raw: Parsed GeoJSON payload, exactly as received

    Returns:
        Tuple of Site records in feature order

    Raises:
        LoadFailure: If the payload shape is invalid
    """
    validate_payload(raw)

    sites: List[Site] = []
    for feature in raw["features"]:
        props = feature["properties"]
        sites.append(Site(
            site=props["site"],
            coordinates=tuple(feature["geometry"]["coordinates"]),
            buildings=tuple(sanitize_building(b) for b in props["buildings"]),
            extra=tuple((k, v) for k, v in props.items() if k not in _SITE_FIELDS),
            feature_extra=tuple((k, v) for k, v in feature.items() if k not in _FEATURE_FIELDS),
        ))
    return tuple(sites)


def _reject_constant(name: str) -> None:
    raise LoadFailure(f"Non-standard JSON constant: {name}")


def load_dataset(path: Path) -> Dataset:
    """
    Read and sanitize the site GeoJSON file.

    Args:
        path: Path to sites.geojson

    Returns:
        Canonical dataset

    Raises:
        LoadFailure: If the file is missing, unparseable or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f, parse_constant=_reject_constant)
    except (IOError, OSError) as e:
        raise LoadFailure(f"Failed to read {path}: {e}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadFailure(f"Failed to parse {path}: {e}")

    dataset = sanitize_dataset(raw)
    logger.info(f"Loaded {len(dataset)} site(s) with {count_buildings(dataset)} building(s) from {path}")
    return dataset
