"""
Historical period table for the timeline filter.

Six fixed segments from the Archaic period to the end of the Western Empire.
Years are signed (negative = BCE). Ranges may overlap (the Republican
segment spans Classical and Hellenistic years); matching is by age tag, never
by year.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Tuple


class InvalidPeriod(Exception):
    """Raised when a period id is not in the period table."""
    pass


@dataclass(frozen=True)
class PeriodSegment:
    id: str
    label: str
    start: int
    end: int
    tags: Tuple[str, ...]

    @property
    def span(self) -> int:
        return self.end - self.start

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "label": self.label,
            "start": self.start,
            "end": self.end,
            "tags": list(self.tags),
        }


class PeriodTable:
    """Ordered, immutable collection of period segments."""

    def __init__(self, segments: Iterable[PeriodSegment]):
        self._segments: Tuple[PeriodSegment, ...] = tuple(segments)
        self._by_id: Dict[str, PeriodSegment] = {}
        for seg in self._segments:
            if seg.id in self._by_id:
                raise ValueError(f"Duplicate period id: {seg.id}")
            if seg.start >= seg.end:
                raise ValueError(f"Period {seg.id}: start must be before end")
            self._by_id[seg.id] = seg

    def __iter__(self) -> Iterator[PeriodSegment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __contains__(self, period_id: object) -> bool:
        return period_id in self._by_id

    def ids(self) -> List[str]:
        return [seg.id for seg in self._segments]

    def get(self, period_id: str) -> PeriodSegment:
        """
        Look up a segment by id.

        Raises:
            InvalidPeriod: If the id is unknown
        """
        try:
            return self._by_id[period_id]
        except KeyError:
            raise InvalidPeriod(f"Unknown period: {period_id!r}")

    def tags_of(self, period_id: str) -> FrozenSet[str]:
        """Age tags that place a building in the given period."""
        return frozenset(self.get(period_id).tags)

    def min_year(self) -> int:
        return min(seg.start for seg in self._segments)

    def max_year(self) -> int:
        return max(seg.end for seg in self._segments)

    def total_span(self) -> int:
        """Years from the earliest start to the latest end."""
        return self.max_year() - self.min_year()


PERIOD_TABLE = PeriodTable([
    PeriodSegment(
        "archaic", "Archaic & Early", -800, -480,
        ("Archaic", "Late Archaic", "Peisistratid"),
    ),
    PeriodSegment(
        "classical", "Classical", -480, -323,
        ("Early Classical", "Periclean", "Classical", "Lycurgan Period", "Late Classical"),
    ),
    PeriodSegment(
        "hellenistic", "Hellenistic", -323, -30,
        ("Hellenistic", "Early Hellenistic", "Late Hellenistic", "Seleucid", "Ptolemaic", "Pergamene"),
    ),
    PeriodSegment(
        "republican", "Republican", -509, -27,
        ("Early Republican", "Middle Republican", "Late Republican", "Republican",
         "Sullan", "Caesarian Period", "Triumviral Period"),
    ),
    PeriodSegment(
        "earlyEmpire", "Early Empire", -27, 192,
        ("Augustan", "Tiberian", "Julio-Claudian", "Flavian", "Nerva–Trajanian",
         "Hadrian", "Antonine"),
    ),
    PeriodSegment(
        "lateEmpire", "Late Empire", 193, 476,
        ("Severan", "Crisis of 3rd Century", "Diocletian-Tetrarch", "Constantinian",
         "Late Roman", "Late Antique"),
    ),
])
