"""
Site map filtering and selection engine.

Narrows the buildings of archaeological sites by architectural attributes
and a historical-period timeline, and keeps the selected site and building
consistent with what the filters leave visible.

Modules:
    models - Site and building records, GeoJSON rendering
    sanitizer - Payload validation and tag cleaning (canonical dataset)
    options - Filter option index per attribute
    periods - Static period table for the timeline
    filters - Filter state and the filter engine
    selection - Selection consistency manager
    views - Side panel, filter chip and tooltip views
    controller - Session controller owning all mutable state
"""

from . import models
from . import sanitizer
from . import options
from . import periods
from . import filters
from . import selection
from . import views
from . import controller

__version__ = "1.0.0"
