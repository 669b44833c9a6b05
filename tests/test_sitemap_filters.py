"""
Tests for src/sitemap/filters.py - filter state and filter engine.
"""

import pytest

from src.sitemap.filters import FilterState, apply_filters, building_matches
from src.sitemap.models import Building, Site
from src.sitemap.periods import PERIOD_TABLE, InvalidPeriod


def _building(doc_id, **tags):
    return Building(doc_id=doc_id, id=doc_id, **{k: tuple(v) for k, v in tags.items()})


def _site(name, *buildings):
    return Site(site=name, coordinates=(0.0, 0.0), buildings=tuple(buildings))


def _state(period_id=None, **values):
    return FilterState(period_id=period_id, **{k: frozenset(v) for k, v in values.items()})


def _doc_ids(dataset):
    return [b.doc_id for site in dataset for b in site.buildings]


DATASET = (
    _site(
        "Delphi",
        _building("D1", order=["Doric", "Ionic"], morphology=["peripteral"], age=["Classical"], date=["4th c. BCE"]),
        _building("D2", order=["Doric"], morphology=["distyle in antis"], age=["Late Archaic"]),
        _building("D3", order=["Corinthian"], morphology=["peristyle"], age=["Early Classical"]),
    ),
    _site(
        "Rome",
        _building("R1", order=["Corinthian"], morphology=["octastyle"], age=["Hadrian"], date=["2nd c. CE"]),
        _building("R2", order=["Ionic"], morphology=["pseudoperipteral"], age=["Late Republican"]),
    ),
    _site(
        "Paestum",
        _building("P1", order=["Doric"], morphology=["peripteral"], age=["Archaic"]),
    ),
)


class TestFilterState:
    """Tests for FilterState operations."""

    def test_default_is_empty(self):
        state = FilterState()
        assert state.is_empty()
        assert state.values("order") == frozenset()

    def test_toggle_adds_and_removes(self):
        state = FilterState().toggle("order", "Doric")
        assert state.values("order") == frozenset({"Doric"})
        assert state.toggle("order", "Doric").values("order") == frozenset()

    def test_toggle_twice_restores(self):
        """Toggling is its own inverse."""
        start = _state(order=["Ionic"], age=["Classical"], period_id="classical")
        assert start.toggle("age", "Hadrian").toggle("age", "Hadrian") == start
        assert start.toggle("age", "Classical").toggle("age", "Classical") == start

    def test_toggle_does_not_touch_other_attributes(self):
        state = _state(order=["Ionic"]).toggle("morphology", "peripteral")
        assert state.values("order") == frozenset({"Ionic"})
        assert state.values("morphology") == frozenset({"peripteral"})

    def test_toggle_unknown_attribute(self):
        with pytest.raises(ValueError, match="Unknown attribute"):
            FilterState().toggle("material", "marble")

    def test_cleared_drops_period(self):
        state = _state(order=["Doric"], period_id="archaic").cleared()
        assert state == FilterState()

    def test_to_dict(self):
        data = _state(order=["Ionic", "Doric"], period_id="classical").to_dict()
        assert data["order"] == ["Doric", "Ionic"]
        assert data["date"] == []
        assert data["period_id"] == "classical"


class TestBuildingMatches:
    """Tests for the per-building test."""

    BUILDING = _building("B", order=["Doric", "Ionic"], morphology=["tetrastyle"], age=["Archaic"])

    def test_or_within_attribute(self):
        assert building_matches(self.BUILDING, _state(order=["Doric"]))
        assert building_matches(self.BUILDING, _state(order=["Corinthian", "Ionic"]))

    def test_excluded_when_no_tag_selected(self):
        assert not building_matches(self.BUILDING, _state(order=["Corinthian"]))

    def test_and_across_attributes(self):
        assert building_matches(self.BUILDING, _state(order=["Doric"], morphology=["tetrastyle"]))
        assert not building_matches(self.BUILDING, _state(order=["Doric"], morphology=["peripteral"]))

    def test_untagged_attribute_fails_active_filter(self):
        assert not building_matches(self.BUILDING, _state(date=["c. 550 BCE"]))

    def test_period_tags(self):
        archaic = PERIOD_TABLE.tags_of("archaic")
        classical = PERIOD_TABLE.tags_of("classical")
        assert building_matches(self.BUILDING, FilterState(), archaic)
        assert not building_matches(self.BUILDING, FilterState(), classical)


class TestApplyFilters:
    """Tests for apply_filters()"""

    def test_empty_filter_identity(self):
        """No filters and no period returns the dataset unchanged."""
        assert apply_filters(DATASET, FilterState()) == DATASET

    def test_conjunction_disjunction_law(self):
        dataset = (_site("S", _building("B", order=["Doric", "Ionic"], morphology=["peripteral"])),
                   _site("T", _building("C", order=["Doric", "Ionic"], morphology=["prostyle"])))

        assert _doc_ids(apply_filters(dataset, _state(order=["Doric"]))) == ["B", "C"]
        assert _doc_ids(apply_filters(dataset, _state(order=["Corinthian"]))) == []
        assert _doc_ids(apply_filters(dataset, _state(order=["Doric"], morphology=["peripteral"]))) == ["B"]

    def test_sites_keep_only_matching_buildings(self):
        derived = apply_filters(DATASET, _state(order=["Doric"]))

        assert [s.site for s in derived] == ["Delphi", "Paestum"]
        assert derived[0].doc_ids() == ["D1", "D2"]

    def test_site_pruning(self):
        """A site with no matching building is absent, not empty."""
        derived = apply_filters(DATASET, _state(age=["Hadrian"]))
        assert [s.site for s in derived] == ["Rome"]
        assert all(s.buildings for s in derived)

    def test_order_mirrors_input(self):
        derived = apply_filters(DATASET, _state(order=["Ionic", "Doric"]))
        assert _doc_ids(derived) == ["D1", "D2", "R2", "P1"]

    def test_date_filter(self):
        derived = apply_filters(DATASET, _state(date=["2nd c. CE"]))
        assert _doc_ids(derived) == ["R1"]

    def test_period_gating(self):
        derived = apply_filters(DATASET, _state(period_id="archaic"))
        assert _doc_ids(derived) == ["D2", "P1"]

    def test_period_and_attribute(self):
        derived = apply_filters(DATASET, _state(order=["Corinthian"], period_id="classical"))
        assert _doc_ids(derived) == ["D3"]

    def test_unknown_period(self):
        with pytest.raises(InvalidPeriod):
            apply_filters(DATASET, _state(period_id="bronzeAge"))

    def test_input_not_mutated(self):
        before = [s.doc_ids() for s in DATASET]
        apply_filters(DATASET, _state(order=["Ionic"]))
        assert [s.doc_ids() for s in DATASET] == before

    def test_deterministic(self):
        state = _state(order=["Doric", "Corinthian"], age=["Classical", "Archaic", "Hadrian"])
        assert apply_filters(DATASET, state) == apply_filters(DATASET, state)

    def test_monotonicity(self):
        """Adding a selected value never grows the result; removing never shrinks it."""
        base = _state(order=["Doric"])
        base_ids = set(_doc_ids(apply_filters(DATASET, base)))

        narrower = base.toggle("age", "Classical")
        narrower_ids = set(_doc_ids(apply_filters(DATASET, narrower)))
        assert narrower_ids <= base_ids

        wider = narrower.toggle("age", "Late Archaic")
        wider_ids = set(_doc_ids(apply_filters(DATASET, wider)))
        assert narrower_ids <= wider_ids <= base_ids

    def test_delphi_scenario(self):
        """Period narrows Delphi to B1; adding Ionic then empties the view."""
        dataset = (_site(
            "Delphi",
            _building("B1", order=["Doric"], age=["Classical"]),
            _building("B2", order=["Ionic"], age=["Archaic"]),
        ),)
        state = _state(period_id="classical")

        derived = apply_filters(dataset, state)
        assert [s.site for s in derived] == ["Delphi"]
        assert derived[0].doc_ids() == ["B1"]

        assert apply_filters(dataset, state.toggle("order", "Ionic")) == ()
