"""
Site and building selection kept consistent with the filtered dataset.

Buildings are selected by doc_id, only when visible under the selected site.
After every recomputation of the filtered dataset, reconcile() drops a
building selection that is no longer visible; the site selection has its own
lifecycle and is left alone.
"""

import logging
from typing import Dict, Optional, Set

from .models import Dataset, find_site

logger = logging.getLogger(__name__)


def visible_doc_ids(derived: Dataset, site_name: Optional[str]) -> Set[str]:
    """Doc ids visible under one site, or under every site if site_name is None."""
    if site_name is None:
        return {b.doc_id for site in derived for b in site.buildings}
    site = find_site(derived, site_name)
    if site is None:
        return set()
    return set(site.doc_ids())


class SelectionManager:
    """Owns the selected site name and selected building doc_id."""

    def __init__(self):
        self.selected_site: Optional[str] = None
        self.selected_building_doc_id: Optional[str] = None

    def select_site(self, site_name: str) -> None:
        self.selected_site = site_name
        self.selected_building_doc_id = None

    def select_building(self, doc_id: str, derived: Dataset) -> bool:
        """
        Select a building if it is visible under the selected site.

        Args:
            doc_id: Building doc_id
            derived: Current filtered dataset

        Returns:
            True if the selection was taken, False if rejected (no site
            selected, or the building is filtered out or belongs elsewhere)
        """
        if self.selected_site is None:
            logger.debug(f"Rejected building {doc_id}: no site selected")
            return False
        if doc_id not in visible_doc_ids(derived, self.selected_site):
            logger.debug(f"Rejected building {doc_id}: not visible under {self.selected_site}")
            return False
        self.selected_building_doc_id = doc_id
        return True

    def clear_building(self) -> None:
        self.selected_building_doc_id = None

    def exit_site(self) -> None:
        self.selected_site = None
        self.selected_building_doc_id = None

    def reconcile(self, derived: Dataset) -> bool:
        """
        Clear a building selection that the filtered dataset no longer shows.

        Returns:
            True if the building selection was cleared
        """
        doc_id = self.selected_building_doc_id
        if doc_id is None:
            return False
        if doc_id in visible_doc_ids(derived, self.selected_site):
            return False
        logger.info(f"Cleared stale building selection {doc_id}")
        self.selected_building_doc_id = None
        return True

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "selected_site": self.selected_site,
            "selected_building_doc_id": self.selected_building_doc_id,
        }
