from __future__ import annotations

from collections.abc import Sequence

from pharma_import.models.category import ExternalCategory

"""Category label -> category id lookup.

Matching is exact first, then fuzzy (substring in either direction), always
in the order of the supplied category list. There is no ranking by
specificity: with a short label the first category containing it wins.
"""

__all__ = [
    "resolve_category",
]


def resolve_category(label: str, categories: Sequence[ExternalCategory]) -> str | None:
    """Return the id of the category matching ``label``, or None.

    Args:
        label: Category text from the import file
        categories: Category snapshot; list order decides ties

    Returns:
        Matching category id, None when nothing matches
    """
    needle = label.strip().casefold()
    if not needle:
        return None

    for cat in categories:
        if cat.name_local.casefold() == needle:
            return cat.id
        if cat.name_alt and cat.name_alt.casefold() == needle:
            return cat.id

    for cat in categories:
        local = cat.name_local.casefold()
        # an empty name is a substring of everything
        if local and (needle in local or local in needle):
            return cat.id
        if cat.name_alt and needle in cat.name_alt.casefold():
            return cat.id

    return None
