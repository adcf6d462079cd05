"""Per-language translation files on disk."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from .errors import StructuralConflict, TranslationFileError
from .keypath import flatten
from .serializer import ModuleSyntaxError, parse_module, render_module

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "js": ".js",
    "esm": ".js",
    "json": ".json",
}


class WriteResult(BaseModel):
    """Outcome of writing one language file."""

    language: str
    path: Path
    success: bool
    keys: int = 0
    error: Optional[str] = None


def language_file_path(directory: Path, language: str, fmt: str = "js") -> Path:
    """Path of the translation file for ``language``.

    The language code is the file's basename, so it must not name another
    directory.

    Raises:
        TranslationFileError: If the code is empty, ``.`` or ``..``, or
            contains a path separator
    """
    directory = Path(directory)
    if not language or language in (".", "..") or any(char in language for char in "/\\\0"):
        raise TranslationFileError(directory, f"invalid language code '{language}'")
    return directory / f"{language}{EXTENSIONS[fmt]}"


def write_language_file(directory: Path, language: str, tree: Mapping[str, Any], fmt: str = "js") -> Path:
    """Render and write one language's translation tree, replacing any existing file.

    Raises:
        TranslationFileError: If the file cannot be written
    """
    path = language_file_path(directory, language, fmt)
    content = render_module(dict(tree), fmt)
    logger.debug("Writing %s", path)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise TranslationFileError(path, f"cannot write file: {e.strerror or e}") from e
    return path


def write_language_files(directory: Path, trees: Mapping[str, Mapping[str, Any]], fmt: str = "js") -> List[WriteResult]:
    """Write every language file independently.

    A failed write is recorded in its result and does not stop the remaining
    languages.
    """
    results = []
    for language, tree in trees.items():
        try:
            path = write_language_file(directory, language, tree, fmt)
        except TranslationFileError as e:
            logger.debug("Write failed for %s: %s", language, e)
            results.append(WriteResult(language=language, path=e.path, success=False, error=str(e)))
            continue
        results.append(WriteResult(language=language, path=path, success=True, keys=len(flatten(tree))))
    return results


def discover_languages(directory: Path, fmt: str = "js") -> List[str]:
    """List language codes that have a translation file, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise TranslationFileError(directory, "translations directory does not exist")
    extension = EXTENSIONS[fmt]
    return sorted(path.stem for path in directory.glob(f"*{extension}") if path.is_file())


def load_language_file(path: Path, fmt: str = "js") -> Dict[str, Any]:
    """Read and parse one translation file into its nested tree.

    Raises:
        TranslationFileError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TranslationFileError(path, f"cannot read file: {e}") from e
    try:
        return parse_module(text, fmt)
    except ModuleSyntaxError as e:
        raise TranslationFileError(path, f"cannot parse file: {e}") from e


def load_flat_maps(directory: Path, fmt: str = "js") -> Dict[str, Dict[str, Any]]:
    """Load every language file in ``directory`` as a flat translation map.

    All files are loaded before anything is returned; the first failure aborts.
    """
    flat_maps = {}
    for language in discover_languages(directory, fmt):
        path = language_file_path(directory, language, fmt)
        tree = load_language_file(path, fmt)
        try:
            flat_maps[language] = flatten(tree)
        except StructuralConflict as e:
            raise TranslationFileError(path, str(e)) from e
        logger.debug("Loaded %d key(s) for %s", len(flat_maps[language]), language)
    return flat_maps
