"""
Session controller for the site map.

Owns the canonical dataset, the filter state and the selection, and is the
only place they change. Every operation recomputes the filtered dataset and
reconciles the selection before returning, so callers never observe a stale
building selection.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import views
from .filters import FilterState, apply_filters
from .models import Dataset, count_buildings, to_feature_collection
from .options import build_option_index
from .periods import PERIOD_TABLE, PeriodTable
from .sanitizer import LoadFailure, load_dataset, sanitize_dataset
from .selection import SelectionManager

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class SiteMapController:
    """Single owner of the site map session state."""

    def __init__(self, periods: PeriodTable = PERIOD_TABLE):
        self.periods = periods
        self.status = STATUS_LOADING
        self.load_error: Optional[str] = None
        self.canonical: Optional[Dataset] = None
        self.options: Dict[str, List[str]] = build_option_index(())
        self.filters = FilterState()
        self.derived: Dataset = ()
        self.selection = SelectionManager()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_payload(self, raw: Any) -> bool:
        """
        Sanitize a fetched payload and publish it as the canonical dataset.

        Loading happens once. A failure leaves the dataset unset for the rest
        of the session.

        Returns:
            True on success, False on LoadFailure
        """
        if self.status != STATUS_LOADING:
            raise RuntimeError(f"Dataset load already attempted (status: {self.status})")
        try:
            dataset = sanitize_dataset(raw)
        except LoadFailure as e:
            return self._fail(e)
        self._publish(dataset)
        return True

    def load_file(self, path: Path) -> bool:
        """Read, sanitize and publish the dataset at path. See load_payload()."""
        if self.status != STATUS_LOADING:
            raise RuntimeError(f"Dataset load already attempted (status: {self.status})")
        try:
            dataset = load_dataset(path)
        except LoadFailure as e:
            return self._fail(e)
        self._publish(dataset)
        return True

    def _fail(self, error: LoadFailure) -> bool:
        logger.error(f"Site dataset load failed: {error}")
        self.status = STATUS_FAILED
        self.load_error = str(error)
        return False

    def _publish(self, dataset: Dataset) -> None:
        self.canonical = dataset
        self.options = build_option_index(dataset)
        self.status = STATUS_READY
        self._recompute()

    def _recompute(self) -> None:
        if self.canonical is None:
            self.derived = ()
            return
        self.derived = apply_filters(self.canonical, self.filters, self.periods)
        self.selection.reconcile(self.derived)

    # ------------------------------------------------------------------
    # Filter events
    # ------------------------------------------------------------------

    def toggle_filter(self, attribute: str, value: str) -> None:
        self.filters = self.filters.toggle(attribute, value)
        self._recompute()

    def clear_filters(self) -> None:
        """Drop every attribute filter and the selected period."""
        self.filters = self.filters.cleared()
        self._recompute()

    def select_period(self, period_id: Optional[str]) -> None:
        """
        Set or clear the timeline period.

        Raises:
            InvalidPeriod: If period_id is not in the period table
        """
        if period_id is not None:
            self.periods.get(period_id)
        self.filters = self.filters.with_period(period_id)
        self._recompute()

    def toggle_period(self, period_id: str) -> None:
        """Timeline click: select the period, or clear it if already selected."""
        if self.filters.period_id == period_id:
            self.select_period(None)
        else:
            self.select_period(period_id)

    # ------------------------------------------------------------------
    # Selection events
    # ------------------------------------------------------------------

    def select_site(self, site_name: str) -> None:
        self.selection.select_site(site_name)

    def select_building(self, doc_id: str) -> bool:
        return self.selection.select_building(doc_id, self.derived)

    def clear_building(self) -> None:
        self.selection.clear_building()

    def exit_site(self) -> None:
        self.selection.exit_site()

    @property
    def selected_site(self) -> Optional[str]:
        return self.selection.selected_site

    @property
    def selected_building_doc_id(self) -> Optional[str]:
        return self.selection.selected_building_doc_id

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def feature_collection(self) -> Dict[str, Any]:
        return to_feature_collection(self.derived)

    def site_panel(self) -> Optional[Dict[str, Any]]:
        if self.canonical is None:
            return None
        return views.site_panel(self.canonical, self.derived, self.selected_site)

    def building_detail(self) -> Optional[Dict[str, Any]]:
        return views.building_detail(self.derived, self.selected_site, self.selected_building_doc_id)

    def summary(self) -> Dict[str, Any]:
        canonical = self.canonical or ()
        return {
            "status": self.status,
            "error": self.load_error,
            "sites": len(canonical),
            "buildings": count_buildings(canonical),
            "visible_sites": len(self.derived),
            "visible_buildings": count_buildings(self.derived),
        }

    def state(self) -> Dict[str, Any]:
        return {
            "filters": self.filters.to_dict(),
            "chips": views.active_filter_chips(self.filters),
            "selection": self.selection.to_dict(),
        }
