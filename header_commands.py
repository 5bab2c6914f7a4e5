"""
header_commands.py

Editor commands for HTML headers: adding IDs, marking headers as excluded
from the Table of Contents, and inserting a ToC.

The operations (assign_ids, mark_no_toc, insert_toc) never touch the document;
they return edits computed against the original text. apply_edits() is the
reference way of applying them, and the run_* functions wrap the whole
command for the UI, returning a CommandResult with the message to show.
"""

import logging
import re
from typing import Iterable, List, NamedTuple, Optional, Union

from slug_utils import SlugRegistry
from toc_utils import NO_TOC_CLASS, build_toc, normalize_levels, scan_headings

logger = logging.getLogger(__name__)

STATUS_INFO = "info"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

MSG_NO_HEADERS_CONFIGURED = "No header tags specified in settings to process."
MSG_NO_MATCHES = "No matching header tags found."

_ID_VALUE_RE = re.compile(r'id="([^"]*)"')
_CLASS_VALUE_RE = re.compile(r'class=(["\'])(.*?)\1', re.DOTALL)


class Replace(NamedTuple):
    start: int
    end: int
    new_text: str


class Insert(NamedTuple):
    position: int
    text: str


Edit = Union[Replace, Insert]


class CommandResult(NamedTuple):
    status: str
    message: str
    text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != STATUS_ERROR


class EditApplicationError(Exception):
    """Raised when a list of edits cannot be applied to a document."""


def _edit_span(edit: Edit) -> tuple:
    if isinstance(edit, Insert):
        return edit.position, edit.position
    return edit.start, edit.end


def apply_edits(text: str, edits: Iterable[Edit]) -> str:
    """
    Apply edits computed against `text`, from the last one to the first so
    that earlier offsets stay valid.

    Raises:
        EditApplicationError: If an edit is out of range or two edits overlap.
            Nothing is applied in that case.
    """
    ordered = sorted(edits, key=_edit_span, reverse=True)
    previous_start = len(text)
    for edit in ordered:
        start, end = _edit_span(edit)
        if start < 0 or end > len(text) or start > end:
            raise EditApplicationError(f"Edit {edit!r} is outside the document (length {len(text)}).")
        if end > previous_start:
            raise EditApplicationError(f"Edit {edit!r} overlaps another edit.")
        previous_start = start

    for edit in ordered:
        if isinstance(edit, Insert):
            text = text[:edit.position] + edit.text + text[edit.position:]
        else:
            text = text[:edit.start] + edit.new_text + text[edit.end:]
    return text


def _with_opening_attributes(heading, attributes: str) -> str:
    """Rebuild the matched header text with a new attribute string in its opening tag."""
    opening_length = len('<h') + 1 + len(heading.attributes) + 1
    tag = heading.raw[:3]
    return f"{tag}{attributes}>{heading.raw[opening_length:]}"


def assign_ids(text: str, levels: Iterable, registry: Optional[SlugRegistry] = None) -> List[Replace]:
    """
    Compute edits that add id="..." to every matching header lacking one.

    Headers that already declare an id are left alone, and their ids are
    reserved so new slugs do not collide with them.

    Args:
        text (str): Document text.
        levels (Iterable): Header levels to process.
        registry (SlugRegistry, optional): Reset before use; a new one is
            created if omitted.

    Returns:
        List[Replace]: Edits in document order.
    """
    if registry is None:
        registry = SlugRegistry()
    else:
        registry.reset()

    headings = scan_headings(text, levels)
    for heading in headings:
        if 'id=' in heading.attributes:
            registry.reserve(_ID_VALUE_RE.findall(heading.attributes))

    edits = []
    for heading in headings:
        if 'id=' in heading.attributes:
            continue
        slug = registry.generate(heading.text)
        replacement = _with_opening_attributes(heading, f'{heading.attributes} id="{slug}"')
        edits.append(Replace(heading.start, heading.end, replacement))
    return edits


def mark_no_toc(text: str, levels: Iterable) -> List[Replace]:
    """
    Compute edits that add the no-toc class to every matching header.
    Headers whose class attribute already mentions no-toc are skipped.
    """
    edits = []
    for heading in scan_headings(text, levels):
        attributes = heading.attributes
        if 'class=' not in attributes:
            new_attributes = f'{attributes} class="{NO_TOC_CLASS}"'
        else:
            class_match = _CLASS_VALUE_RE.search(attributes)
            if class_match is None:
                logger.debug(f"Skipping header at {heading.start}: unquoted class attribute.")
                continue
            classes = class_match.group(2)
            if NO_TOC_CLASS in classes:
                continue
            quote = class_match.group(1)
            new_classes = f"{classes} {NO_TOC_CLASS}".strip()
            new_attributes = (
                attributes[:class_match.start()]
                + f"class={quote}{new_classes}{quote}"
                + attributes[class_match.end():]
            )
        replacement = _with_opening_attributes(heading, new_attributes)
        edits.append(Replace(heading.start, heading.end, replacement))
    return edits


def insert_toc(text: str, levels: Iterable, position: int) -> Optional[Insert]:
    """Return an Insert edit placing the ToC at `position`, or None if there is nothing to list."""
    toc = build_toc(text, levels)
    if not toc:
        return None
    return Insert(position, toc)


def _apply_or_fail(text: str, edits: List[Edit], success_message: str, failure_message: str) -> CommandResult:
    try:
        new_text = apply_edits(text, edits)
    except EditApplicationError as e:
        logger.error(f"{failure_message} {e}")
        return CommandResult(STATUS_ERROR, failure_message)
    logger.info(f"Applied {len(edits)} edit(s).")
    return CommandResult(STATUS_SUCCESS, success_message, new_text)


def run_add_ids(text: str, levels: Iterable) -> CommandResult:
    """Add IDs to the configured headers and return the updated document."""
    levels = normalize_levels(levels)
    if not levels:
        return CommandResult(STATUS_INFO, MSG_NO_HEADERS_CONFIGURED)
    if not scan_headings(text, levels):
        return CommandResult(STATUS_INFO, MSG_NO_MATCHES)

    edits = assign_ids(text, levels)
    if not edits:
        return CommandResult(STATUS_INFO, "All matching headers already have IDs.")
    return _apply_or_fail(
        text, edits,
        "ID attributes added to specified headers!",
        "Failed to add ID attributes.",
    )


def run_mark_no_toc(text: str, levels: Iterable) -> CommandResult:
    """Mark every configured header with the no-toc class."""
    levels = normalize_levels(levels)
    if not levels:
        return CommandResult(STATUS_INFO, MSG_NO_HEADERS_CONFIGURED)
    if not scan_headings(text, levels):
        return CommandResult(STATUS_INFO, MSG_NO_MATCHES)

    edits = mark_no_toc(text, levels)
    if not edits:
        return CommandResult(STATUS_INFO, f"All matching headers are already marked {NO_TOC_CLASS}.")
    return _apply_or_fail(
        text, edits,
        f"Added the {NO_TOC_CLASS} class to {len(edits)} header(s).",
        f"Failed to add the {NO_TOC_CLASS} class.",
    )


def run_insert_toc(text: str, levels: Iterable, position: int) -> CommandResult:
    """Insert a Table of Contents at `position`."""
    levels = normalize_levels(levels)
    if not levels:
        return CommandResult(STATUS_INFO, MSG_NO_HEADERS_CONFIGURED)

    edit = insert_toc(text, levels, position)
    if edit is None:
        return CommandResult(STATUS_INFO, "No headers with IDs found for the table of contents.")
    return _apply_or_fail(
        text, [edit],
        "Table of Contents inserted.",
        "Failed to insert the Table of Contents.",
    )
