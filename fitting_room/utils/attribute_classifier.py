"""Keyword-based styling cue detection over garment descriptions."""

import re
from dataclasses import replace

from ..models import StylingFlags


FULL_BODY_TERMS = ['dress', 'gown', 'frock', 'jumpsuit', 'romper', 'suit', 'maxi', 'mini', 'midi']
NECKLACE_TERMS = ['necklace', 'pendant', 'choker', 'chain', 'jewel', 'beads', 'pearls', 'strand', 'neckwear']
SHOE_TERMS = ['shoe', 'boots', 'heels', 'sandals', 'sneakers', 'flats', 'pumps', 'footwear', 'stiletto', 'wedge']
BOTTOM_TERMS = ['skirt', 'pants', 'trousers', 'jeans', 'leggings', 'shorts']
TOP_TERMS = ['top', 'shirt', 'blouse', 't-shirt', 'cardigan', 'jacket', 'bodysuit', 'sweater', 'vest']
HEADWEAR_TERMS = ['hat', 'cap', 'beanie', 'fedora', 'beret']


def _words(terms: list[str]) -> re.Pattern:
    return re.compile(r'\b(' + '|'.join(re.escape(t) for t in terms) + r')\b')


def _substrings(terms: list[str]) -> re.Pattern:
    return re.compile('|'.join(re.escape(t) for t in terms))


# (flag, pattern). Bottoms match as plain substrings so plurals and compounds
# like "miniskirt" or "sweatpants" count.
FLAG_PATTERNS: list[tuple[str, re.Pattern]] = [
    ('has_full_body_outfit', _words(FULL_BODY_TERMS)),
    ('has_necklace', _words(NECKLACE_TERMS)),
    ('has_shoes', _words(SHOE_TERMS)),
    ('replaces_bottoms', _substrings(BOTTOM_TERMS)),
    ('replaces_top', _words(TOP_TERMS)),
    ('has_headwear', _words(HEADWEAR_TERMS)),
]


def combine_descriptions(descriptions: list[str], consolidated: bool) -> str:
    """Collapse per-garment descriptions into the text used for styling.
    
    Consolidated batches share one description, so only the first is used.
    Otherwise non-empty descriptions are joined with ", ".
    """
    if consolidated:
        return (descriptions[0] or "") if descriptions else ""
    return ", ".join(d for d in descriptions if d)


def classify(descriptions: list[str], consolidated: bool = False) -> StylingFlags:
    """Derive styling flags from garment descriptions.
    
    This is a heuristic: a keyword anywhere in the text sets the flag.
    """
    text = combine_descriptions(descriptions, consolidated).lower()
    
    found = {name: bool(pattern.search(text)) for name, pattern in FLAG_PATTERNS}
    flags = StylingFlags(**found)
    
    # A full-body outfit replaces both halves.
    if flags.has_full_body_outfit:
        flags = replace(flags, replaces_top=True, replaces_bottoms=True)
    
    return flags
