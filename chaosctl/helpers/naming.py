"""Naming utilities for mapping path segments to the service's field names."""

from __future__ import annotations

import re

# Words (and suffixes: "podchaos", "stresschaos") whose plural is themselves.
_UNCOUNTABLE = (
    "chaos",
    "data",
    "metadata",
    "info",
    "series",
    "species",
    "news",
)

_IRREGULAR = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "foot": "feet",
    "tooth": "teeth",
    "goose": "geese",
    "ox": "oxen",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "criterion": "criteria",
}

# Words ending in "f"/"fe" that just take an "s".
_F_TAKES_S = frozenset({"roof", "chief", "belief", "proof", "chef", "safe", "cafe"})

_O_TAKES_ES = frozenset({"hero", "potato", "tomato", "echo", "veto"})


def pluralize(word: str) -> str:
    """Return the English plural of ``word`` using simple suffix rules.

    Words that already look plural are returned unchanged, so a segment
    can be passed through more than once. The case of the first letter is
    kept.
    """
    if not word:
        return word

    lower = word.lower()
    if lower.endswith(_UNCOUNTABLE):
        return word
    if lower in _IRREGULAR:
        return _match_case(word, _IRREGULAR[lower])
    if lower in _IRREGULAR.values():
        return word
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        return word

    if lower.endswith("is"):
        return word[:-2] + "es"
    if re.search(r"(s|sh|ch|x|z)$", lower):
        return word + "es"
    if re.search(r"[^aeiou]y$", lower):
        return word[:-1] + "ies"
    if lower not in _F_TAKES_S:
        if lower.endswith("fe"):
            return word[:-2] + "ves"
        if lower.endswith("f") and not lower.endswith("ff"):
            return word[:-1] + "ves"
    if lower in _O_TAKES_ES:
        return word + "es"
    return word + "s"


def _match_case(original: str, replacement: str) -> str:
    if original[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement
