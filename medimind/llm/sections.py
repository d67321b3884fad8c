"""Split a free-text six-agent reply into its labeled sections."""

from __future__ import annotations

import re
from dataclasses import dataclass

from medimind.models import SectionMap


@dataclass(frozen=True)
class SectionMarker:
    key: str
    glyph: str
    label: str

    @property
    def pattern(self) -> str:
        # Glyph + label (colon optional), or a bare label opening a line that
        # must end in a colon. Tolerates markdown bold/heading decoration.
        glyph = re.escape(self.glyph) + "\ufe0f?"
        return (
            rf"(?:{glyph}\s*[#*]*[ \t]*{self.label}\**:?\**"
            rf"|^[ \t]*[#*]*[ \t]*{self.label}\**:\**)"
        )


# Priority order: a section ends at the next marker that sorts after it here.
SECTION_MARKERS: tuple[SectionMarker, ...] = (
    SectionMarker("symptom", "\U0001F50D", "SYMPTOM_ANALYZER"),
    SectionMarker("risk", "\U0001F4CA", "RISK_PREDICTOR"),
    SectionMarker("fraud", "\U0001F6E1", "FRAUD_DETECTOR"),
    SectionMarker("security", "\U0001F510", "SECURITY_GUARDIAN"),
    SectionMarker("coordinator", "\U0001F916", "COORDINATOR_INSIGHTS"),
    SectionMarker("recommendations", "\U0001F48A", "RECOMMENDATIONS"),
)

_PRIORITY = {marker.key: index for index, marker in enumerate(SECTION_MARKERS)}

_MARKER_RE = re.compile(
    "|".join(f"(?P<{marker.key}>{marker.pattern})" for marker in SECTION_MARKERS),
    re.IGNORECASE | re.MULTILINE,
)


@dataclass(frozen=True)
class MarkerHit:
    key: str
    start: int
    end: int

    @property
    def priority(self) -> int:
        return _PRIORITY[self.key]


def find_markers(reply: str) -> list[MarkerHit]:
    """All marker occurrences in document order, from one pass over the reply."""
    return [
        MarkerHit(key=match.lastgroup, start=match.start(), end=match.end())
        for match in _MARKER_RE.finditer(reply)
        if match.lastgroup is not None
    ]


def extract_sections(reply: str) -> SectionMap:
    """Map each section key to its trimmed body, or "" when its marker is absent.

    A section starts after the first occurrence of its own marker and runs
    until the first later marker of higher priority index, or end of text.
    """
    hits = find_markers(reply)
    first_hits: dict[str, MarkerHit] = {}
    for hit in hits:
        first_hits.setdefault(hit.key, hit)

    values: dict[str, str] = {}
    for marker in SECTION_MARKERS:
        start_hit = first_hits.get(marker.key)
        if start_hit is None:
            values[marker.key] = ""
            continue
        end = next(
            (
                hit.start
                for hit in hits
                if hit.start >= start_hit.end and hit.priority > start_hit.priority
            ),
            len(reply),
        )
        values[marker.key] = reply[start_hit.end:end].strip()

    return SectionMap(**values)
