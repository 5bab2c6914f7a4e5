"""
Module: slug_utils.py
Purpose: Slug generation for HTML header IDs.

Import flow:
- slug_utils.py is standalone and does not import from other app modules.
- header_commands.py creates one SlugRegistry per "Add Header IDs" run.

Usage:
- registry = SlugRegistry(); registry.generate("Hello &amp; Welcome") -> "hello-welcome"
- slugify(text, registry) is a functional shortcut for the same thing.
"""

import re
from typing import Iterable, Optional, Set

MAX_SLUG_LENGTH = 15

# Only the entities that commonly show up in heading text are decoded.
_ENTITY_REPLACEMENTS = (
    ('&nbsp;', ' '),
    ('&amp;', '&'),
)

_WHITESPACE_RE = re.compile(r'\s+')
_NON_WORD_RE = re.compile(r'[^\w-]+', re.ASCII)
_MULTI_HYPHEN_RE = re.compile(r'-{2,}')


def base_slug(text: str) -> str:
    """
    Normalize heading text into a slug without any uniqueness suffix.
    Lowercase, spaces to hyphens, non-word characters removed, at most
    MAX_SLUG_LENGTH characters. May return an empty string.
    """
    for entity, replacement in _ENTITY_REPLACEMENTS:
        text = text.replace(entity, replacement)

    slug = text.lower().strip()
    slug = _WHITESPACE_RE.sub('-', slug)
    slug = _NON_WORD_RE.sub('', slug)
    slug = _MULTI_HYPHEN_RE.sub('-', slug)
    slug = slug.strip('-')

    if len(slug) > MAX_SLUG_LENGTH:
        slug = slug[:MAX_SLUG_LENGTH].rstrip('-')
    return slug


class SlugRegistry:
    """
    Tracks the slugs issued during one ID assignment run.

    The empty string is reserved up front, so headings without any usable
    text still get a distinct, non-empty ID ("-1", "-2", ...).
    """

    def __init__(self, reserved: Optional[Iterable[str]] = None):
        self.used: Set[str] = set()
        self.reset()
        if reserved:
            self.reserve(reserved)

    def reset(self):
        """Forget every slug issued so far."""
        self.used.clear()
        self.used.add('')

    def reserve(self, slugs: Iterable[str]):
        """Mark IDs that already exist in the document as taken."""
        self.used.update(slugs)

    def __contains__(self, slug: str) -> bool:
        return slug in self.used

    def generate(self, text: str) -> str:
        """
        Generate a unique slug for the given heading text.

        Args:
            text (str): Plain heading text (sub-tags already stripped).

        Returns:
            str: The slug, suffixed with -1, -2, ... if the base was taken.
        """
        slug = base_slug(text)
        unique_slug = slug
        counter = 1
        while unique_slug in self.used:
            unique_slug = f"{slug}-{counter}"
            counter += 1
        self.used.add(unique_slug)
        return unique_slug


def slugify(text: str, registry: Optional[SlugRegistry] = None) -> str:
    """Generate a slug for text, using a throwaway registry if none is given."""
    if registry is None:
        registry = SlugRegistry()
    return registry.generate(text)
