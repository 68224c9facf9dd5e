from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterator, List, Optional, Tuple

import regex

logger = logging.getLogger(__name__)

# Invisible characters that only ever get in the way of matching.
# U+200D (zero-width joiner) is left alone: emoji sequences need it.
_INVISIBLE = re.compile("[\u200b\u2060\ufeff]")
_LINE_ENDINGS = re.compile(r"\r\n?")
# Whitespace plus the odd Unicode spaces share sheets like to add
_EDGE_CHARS = " \t\n\v\f\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u202f\u205f\u3000"

_GRAPHEME = regex.compile(r"\X")
_VARIATION_SELECTOR = "\ufe0f"


def normalize(text: Any) -> Optional[str]:
    """
    Prepare raw share text for the matchers.

    Returns None for anything that isn't a str. Line endings are unified to LF,
    invisible format characters are dropped and the ends are trimmed.
    Internal lines are kept as-is since grid rows depend on them.
    """
    if not isinstance(text, str):
        logger.debug("normalize: rejecting non-str input of type %s", type(text).__name__)
        return None
    text = _LINE_ENDINGS.sub("\n", text)
    text = _INVISIBLE.sub("", text)
    return text.strip(_EDGE_CHARS)


def graphemes(line: str) -> List[str]:
    """
    Split a line into user-perceived characters.

    Emoji variation selectors are dropped from each cluster so a square
    with or without a trailing U+FE0F compares equal.
    """
    return [g.replace(_VARIATION_SELECTOR, "") for g in _GRAPHEME.findall(line)]


def iter_lines(text: str, pos: int = 0) -> Iterator[Tuple[int, int, str]]:
    """Yield (start, end, line) for each line of text from pos on, end excluding the newline."""
    n = len(text)
    while pos < n:
        end = text.find("\n", pos)
        if end == -1:
            end = n
        yield pos, end, text[pos:end]
        pos = end + 1


def _never(line: str) -> bool:
    return False


# Blank or skipped lines allowed between a header and the first grid row
MAX_LEAD_LINES = 3


def take_grid(text: str, pos: int, is_row: Callable[[str], bool],
              max_rows: int, skip: Callable[[str], bool] = _never) -> Tuple[List[str], int]:
    """
    Collect the grid rows on the lines following the one that holds pos.

    Up to MAX_LEAD_LINES blank lines, or lines accepted by `skip`, are passed
    over until the first row; after that the grid ends at the first line that
    isn't a row, or after max_rows rows. Returns the stripped rows and the
    offset just past the last row (pos itself when there are none).
    """
    rows: List[str] = []
    end = pos
    newline = text.find("\n", pos)
    if newline == -1:
        return rows, end
    lead = 0
    for _, line_end, line in iter_lines(text, newline + 1):
        stripped = line.strip()
        if is_row(stripped):
            rows.append(stripped)
            end = line_end
            if len(rows) >= max_rows:
                break
            continue
        if rows or (stripped and not skip(stripped)):
            break
        lead += 1
        if lead > MAX_LEAD_LINES:
            break
    return rows, end


def scan_blocks(text: str, pattern: re.Pattern[str], is_row: Callable[[str], bool], max_rows: int,
                skip: Callable[[str], bool] = _never) -> Iterator[Tuple[re.Match[str], List[str], int]]:
    """
    Yield (header match, grid rows, block end) for each header `pattern` finds.

    The header search resumes after each block, so no text is scanned twice
    for the same game. Headers on one line share that line's grid.
    """
    pos = 0
    line_end = -1
    rows: List[str] = []
    grid_end = 0
    while True:
        m = pattern.search(text, pos)
        if m is None:
            return
        if m.end() > line_end:
            line_end = text.find("\n", m.end())
            if line_end == -1:
                line_end = len(text)
            rows, grid_end = take_grid(text, m.end(), is_row, max_rows, skip)
        end = grid_end if rows else m.end()
        yield m, rows, end
        pos = end


# Puzzle numbers: plain digits or comma-grouped thousands ("12,345").
# Bounded so a runaway digit string is no match rather than a huge int.
NUMBER_PATTERN = r"\d{1,3}(?:,\d{3}){1,3}(?!,?\d)|\d{1,9}(?!,?\d)"


def parse_number(token: str) -> int:
    return int(token.replace(",", ""))
