"""
Selection parsing for menu / flag input.

Accepted input is either the everything token (``all``, exact match) or a
comma-separated list where each entry is

  • a single letter, read as a zero-based index into the catalog
    (``a`` → first entry, ``b`` → second, ...), or
  • a full catalog name, matched case-insensitively.

Letters win over names: a one-character catalog name cannot be reached by
name. Entries that match nothing, or repeat an accepted entry, are dropped
and reported back; only a malformed string (digits, punctuation) fails the
whole call.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .catalog import ALL_TOKEN, check_segment
from .errors import SelectionFormatError

_ALLOWED = re.compile(r"[A-Za-z,\s]*")


@dataclass
class SelectionResult:
    ok: bool
    selected: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok and bool(self.selected)

    def warnings(self) -> List[str]:
        """One message per problem kind, never one per entry."""
        out: List[str] = []
        if self.invalid:
            out.append("Ignored invalid entries: " + ", ".join(self.invalid))
        if self.duplicates:
            out.append("Ignored duplicate entries: " + ", ".join(self.duplicates))
        return out

    def raise_for_format(self, raw: str) -> None:
        if not self.ok:
            raise SelectionFormatError(raw)


def _letter_index(piece: str, size: int) -> Optional[int]:
    if len(piece) != 1:
        return None
    idx = ord(piece.lower()) - ord("a")
    return idx if 0 <= idx < size else None


def resolve_selection(
    raw: str,
    catalog: Sequence[str],
    *,
    all_token: str = ALL_TOKEN,
) -> SelectionResult:
    """Resolve *raw* against *catalog*; see module docstring for the grammar."""
    if not catalog:
        raise ValueError("catalog must not be empty")

    text = raw if raw is not None else ""
    if text.strip() == all_token:
        return SelectionResult(ok=True, selected=list(catalog))
    if not _ALLOWED.fullmatch(text):
        return SelectionResult(ok=False)

    by_name = {name.lower(): name for name in catalog}
    result = SelectionResult(ok=True)
    seen_raw = set()

    for piece in (p.strip() for p in text.split(",")):
        if not piece:
            continue
        key = piece.lower()
        if key in seen_raw:
            result.duplicates.append(piece)
            continue

        idx = _letter_index(piece, len(catalog))
        match = catalog[idx] if idx is not None else by_name.get(key)
        if match is None:
            result.invalid.append(piece)
            continue
        if match in result.selected:
            result.duplicates.append(piece)
            continue

        seen_raw.add(key)
        result.selected.append(match)

    return result


def parse_custom_categories(raw: str) -> Tuple[str, ...]:
    """Split a user-supplied category list: trimmed, deduplicated, sorted."""
    unique = {}
    for piece in (raw or "").split(","):
        name = piece.strip()
        if name:
            check_segment(name, "LoRA category")
        if name and name.lower() not in unique:
            unique[name.lower()] = name
    if not unique:
        raise ValueError("custom category list is empty")
    return tuple(sorted(unique.values(), key=lambda s: (s.lower(), s)))
