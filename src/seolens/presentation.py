"""
Splits the oracle's free-form narrative into labeled sections for display.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

MARKDOWN_HEADING_RE = re.compile(r"^#{1,6}\s+(.+?)\s*#*$")
BOLD_LINE_RE = re.compile(r"^\*\*(.+?)\*\*:?$")
COLON_LINE_RE = re.compile(r"^([^:]{1,80}):$")


@dataclass(frozen=True)
class NarrativeSection:
    label: Optional[str]
    body: str


def heading_label(line: str) -> Optional[str]:
    """Return the label if ``line`` is a section heading, else None."""
    stripped = line.strip()
    for pattern in (MARKDOWN_HEADING_RE, BOLD_LINE_RE, COLON_LINE_RE):
        match = pattern.match(stripped)
        if match:
            return match.group(1).strip().rstrip(":").strip()
    return None


def split_narrative(text: Optional[str]) -> List[NarrativeSection]:
    """
    Split narrative text on heading lines and blank lines.

    A heading starts a new labeled section. Blank-line separated blocks
    without a heading become unlabeled sections. Empty sections are dropped.
    """
    sections: List[NarrativeSection] = []
    label: Optional[str] = None
    lines: List[str] = []

    def flush() -> None:
        body = "\n".join(lines).strip()
        if body or label:
            sections.append(NarrativeSection(label=label, body=body))
        lines.clear()

    for line in (text or "").splitlines():
        heading = heading_label(line)
        if heading is not None:
            flush()
            label = heading
        elif not line.strip():
            # A blank line only ends an unlabeled block.
            if label is None:
                if lines:
                    flush()
            elif lines:
                lines.append("")
        else:
            lines.append(line.rstrip())
    flush()
    return sections
