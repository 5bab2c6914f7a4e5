"""
Module: toc_utils.py
Purpose: HTML header scanning and Table of Contents (ToC) generation.

Import flow:
- toc_utils.py is standalone and does not import from main.py or other UI modules.
- header_commands.py builds the editor commands on top of scan_headings().

Usage:
- Use scan_headings(text, levels) to find <hN>...</hN> headers.
- Use scan_headings(text, levels, with_identifier=True) to only get headers carrying id="...".
- Use build_toc(text, levels) to get a nested <ul> ToC string.

Scanning is a flat regex pass, not a DOM parse: the first closing tag of the
same level ends a header, so same-level nested headers are not supported.
Attribute checks (id=, class=, no-toc) are plain substring tests.
"""

import re
from typing import Iterable, List, NamedTuple, Optional

NO_TOC_CLASS = 'no-toc'
TOC_INDENT = '  '

_TAG_RE = re.compile(r'<[^>]*>')
_VALID_LEVEL_RE = re.compile(r'[1-6]')


class HeadingMatch(NamedTuple):
    level: int
    attributes: str
    inner_content: str
    start: int
    end: int
    raw: str
    identifier: Optional[str] = None

    @property
    def text(self) -> str:
        """Header text with inline tags removed."""
        return strip_tags(self.inner_content).strip()


def strip_tags(markup: str) -> str:
    return _TAG_RE.sub('', markup)


def normalize_levels(levels: Iterable) -> List[str]:
    """Keep only the entries that name a header level 1-6, as strings."""
    result = []
    for level in levels or ():
        level = str(level).strip()
        if _VALID_LEVEL_RE.fullmatch(level) and level not in result:
            result.append(level)
    return result


def _heading_pattern(levels: List[str], with_identifier: bool) -> re.Pattern:
    alternation = '|'.join(levels)
    if with_identifier:
        pattern = rf'<h({alternation})([^>]*?)id="([^"]*)"([^>]*)>([\s\S]*?)</h\1>'
    else:
        pattern = rf'<h({alternation})([^>]*)>([\s\S]*?)</h\1>'
    return re.compile(pattern, re.IGNORECASE)


def scan_headings(text: str, levels: Iterable, with_identifier: bool = False) -> List[HeadingMatch]:
    """
    Find all <hN ...>...</hN> headers of the given levels, in document order.

    Args:
        text (str): Document text.
        levels (Iterable): Header levels to match, e.g. ["1", "2"].
        with_identifier (bool): Only match headers whose opening tag has id="...".
            The attributes around the id are joined into `attributes`.

    Returns:
        List[HeadingMatch]: Empty if no levels are configured or nothing matches.
    """
    levels = normalize_levels(levels)
    if not levels or not text:
        return []

    headings = []
    for match in _heading_pattern(levels, with_identifier).finditer(text):
        if with_identifier:
            level, before, identifier, after, inner = match.groups()
            attributes = before + after
        else:
            level, attributes, inner = match.groups()
            identifier = None
        headings.append(HeadingMatch(
            level=int(level),
            attributes=attributes,
            inner_content=inner,
            start=match.start(),
            end=match.end(),
            raw=match.group(0),
            identifier=identifier,
        ))
    return headings


def is_no_toc(heading: HeadingMatch) -> bool:
    return NO_TOC_CLASS in heading.attributes


def format_toc(entries: List[tuple]) -> str:
    """
    Format (level, anchor, text) entries as a nested <ul> list.
    A jump of several levels opens one <ul> per level skipped.
    Returns an empty string if there are no entries.
    """
    if not entries:
        return ''
    lines = []
    last_level = 0
    for level, anchor, label in entries:
        while level < last_level:
            lines.append(f"{TOC_INDENT * (last_level - 1)}</ul>")
            last_level -= 1
        while level > last_level:
            last_level += 1
            lines.append(f"{TOC_INDENT * (last_level - 1)}<ul>")
        lines.append(f'{TOC_INDENT * level}<li><a href="#{anchor}">{label}</a></li>')
        last_level = level
    while last_level > 0:
        lines.append(f"{TOC_INDENT * (last_level - 1)}</ul>")
        last_level -= 1
    return '\n'.join(lines) + '\n'


def build_toc(text: str, levels: Iterable) -> str:
    """
    Build a ToC from the headers that already carry an id.
    Headers marked with the no-toc class are left out and do not
    affect nesting of their neighbours.
    """
    entries = [
        (heading.level, heading.identifier, heading.text)
        for heading in scan_headings(text, levels, with_identifier=True)
        if not is_no_toc(heading)
    ]
    return format_toc(entries)
