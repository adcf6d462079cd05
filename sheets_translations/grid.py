"""Reading the translations sheet into per-language translation trees.

Sheet layout::

    row 0   title (ignored)
    row 1   <label> | en | fr | ...
    row 2+  home.title | Hello | Bonjour | ...

Column 0 of every data row holds the dot-delimited translation key, the
remaining columns hold values in header order.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from .keypath import unflatten

logger = logging.getLogger(__name__)

HEADER_ROW = 1

Row = Sequence[Optional[str]]
FlatMaps = Dict[str, Dict[str, str]]


class Translation(NamedTuple):
    """One translated value parsed from a sheet row."""

    language: str
    key: str
    value: str


def read_grid(grid: Sequence[Row]) -> Tuple[List[str], List[Row]]:
    """Split a raw sheet range into the language header and data rows.

    Args:
        grid: Rows of cells as returned by the spreadsheet API

    Returns:
        Tuple of (language codes in column order, data rows)
    """
    if len(grid) <= HEADER_ROW:
        logger.debug("Sheet has %d row(s), no language header found", len(grid))
        return [], []

    header = grid[HEADER_ROW]
    languages = [str(cell).strip() if cell is not None else "" for cell in header[1:]]

    seen = set()
    for language in languages:
        if language and language in seen:
            logger.warning("Language '%s' appears twice in the header, the rightmost column wins", language)
        seen.add(language)

    logger.debug("Found languages %s", languages)
    return languages, list(grid[HEADER_ROW + 1:])


def parse_row(languages: Sequence[str], row: Row) -> List[Translation]:
    """Turn one data row into translations, matching cells to languages by position.

    The row is not modified. Missing trailing cells produce no translation for
    those languages; cells beyond the header are ignored. Values are kept
    verbatim, whitespace included.
    """
    if not row:
        return []

    key = row[0]
    if key is None or key == "":
        logger.debug("Skipping row without translation key: %r", list(row))
        return []
    key = str(key)

    cells = list(row[1:])
    if len(cells) > len(languages):
        logger.warning(
            "Row '%s' has %d value(s) but the header lists %d language(s), ignoring the extra cells",
            key, len(cells), len(languages)
        )
        cells = cells[:len(languages)]

    translations = []
    for index, cell in enumerate(cells):
        language = languages[index]
        if not language:
            continue
        translations.append(Translation(language, key, "" if cell is None else str(cell)))
    return translations


def assemble_flat_maps(languages: Sequence[str], rows: Sequence[Row]) -> FlatMaps:
    """Collect every row into one flat translation map per language.

    A key repeated in a later row overwrites the earlier value (last write wins).
    """
    flat_maps: FlatMaps = {}

    for row_number, row in enumerate(rows, start=HEADER_ROW + 2):
        for translation in parse_row(languages, row):
            entries = flat_maps.setdefault(translation.language, {})
            if translation.key in entries:
                logger.warning(
                    "Duplicate key '%s' for language '%s', sheet row %d overwrites the earlier value",
                    translation.key, translation.language, row_number
                )
            entries[translation.key] = translation.value

    return flat_maps


def build_translation_trees(languages: Sequence[str], rows: Sequence[Row]) -> Dict[str, Dict[str, Any]]:
    """Assemble nested translation trees, one per language found in the rows.

    Raises:
        StructuralConflict: If a key is both a value and a group for some language
    """
    flat_maps = assemble_flat_maps(languages, rows)
    return {language: unflatten(entries) for language, entries in flat_maps.items()}


def trees_from_grid(grid: Sequence[Row]) -> Dict[str, Dict[str, Any]]:
    """Read a raw sheet range straight into per-language translation trees."""
    languages, rows = read_grid(grid)
    return build_translation_trees(languages, rows)
