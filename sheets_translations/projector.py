"""Projection of per-language flat translation maps back into a sheet table."""

import json
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

KEY_COLUMN_LABEL = "Key Name"


def order_languages(languages: Iterable[str], reference_language: str) -> List[str]:
    """Reference language first, then the others in discovery order."""
    return [reference_language] + [language for language in languages if language != reference_language]


def to_cell(value: Any) -> str:
    """Convert a translation value to cell text; arrays and numbers become JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_frame(flat_maps: Mapping[str, Mapping[str, Any]], reference_language: str) -> pd.DataFrame:
    """Align every language to the reference language's keys.

    Rows are the reference keys in their natural order, columns are languages
    (reference first). Keys a language lacks become empty strings; keys only
    other languages have are dropped.

    Raises:
        ValueError: If the reference language is not among ``flat_maps``
    """
    if reference_language not in flat_maps:
        raise ValueError(f"Reference language '{reference_language}' has no translations")

    keys = list(flat_maps[reference_language].keys())
    languages = order_languages(flat_maps.keys(), reference_language)

    columns: Dict[str, pd.Series] = {}
    for language in languages:
        cells = {key: to_cell(value) for key, value in flat_maps[language].items()}
        columns[language] = pd.Series(cells, dtype=object).reindex(keys)

    frame = pd.DataFrame(columns, index=pd.Index(keys, dtype=object), columns=languages)
    return frame.fillna("")


def project_columns(flat_maps: Mapping[str, Mapping[str, Any]], reference_language: str = "en") -> List[List[str]]:
    """Build the column-major table uploaded on push.

    The first column is the ``Key Name`` label followed by the reference keys;
    each following column is a language code followed by its aligned values.
    """
    frame = build_frame(flat_maps, reference_language)
    table = [[KEY_COLUMN_LABEL] + [str(key) for key in frame.index]]
    for language in frame.columns:
        table.append([language] + frame[language].tolist())
    return table


def pad_columns(columns: List[List[str]], width: int, height: int) -> List[List[str]]:
    """Pad a column-major table with empty cells to at least ``width`` x ``height``.

    Used to blank out whatever the previous upload left beyond the new table.
    """
    height = max([height] + [len(column) for column in columns])
    padded = [column + [""] * (height - len(column)) for column in columns]
    while len(padded) < width:
        padded.append([""] * height)
    return padded
