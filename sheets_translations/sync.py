"""Pull and push between the translations sheet and per-language files."""

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

from .client import SheetsClient, sheet_range
from .config import Settings
from .errors import TranslationFileError
from .files import WriteResult, language_file_path, load_flat_maps, write_language_files
from .grid import build_translation_trees, read_grid
from .projector import order_languages, pad_columns, project_columns

logger = logging.getLogger(__name__)

# Push writes the header row and everything below it; row 1 (title) is kept.
PUSH_ANCHOR_CELL = "A2"


class PullResult(BaseModel):
    """Outcome of a pull: one write result per language."""

    languages: List[str] = Field(default_factory=list)
    results: List[WriteResult] = Field(default_factory=list)

    @property
    def failures(self) -> List[WriteResult]:
        return [result for result in self.results if not result.success]

    @property
    def success(self) -> bool:
        return not self.failures


class PushResult(BaseModel):
    """Outcome of a push."""

    languages: List[str]
    keys: int
    range: str
    updated_cells: Optional[int] = None


class TranslationSync:
    """Runs pull or push for one project's settings."""

    def __init__(self, settings: Settings, client: SheetsClient, console: Optional[Console] = None):
        self.settings = settings
        self.client = client
        self.console = console or Console()

    @property
    def translations_dir(self) -> Path:
        return self.settings.translations_dir

    def pull(self) -> PullResult:
        """Download the sheet and write one translation file per language.

        Key conflicts are detected for every language before any file is
        written. Individual file writes are independent: a failed write is
        reported in the result and the other languages are still written.

        Raises:
            RemoteError: If the sheet cannot be fetched
            StructuralConflict: If a key is both a value and a group
            TranslationFileError: If the translations directory cannot be created
        """
        grid = self.client.get_values(self.settings.spreadsheet_id, sheet_range(self.settings.sheet_name))
        languages, rows = read_grid(grid)
        found = ", ".join(language for language in languages if language) or "none"
        self.console.print(f"Found {len(rows)} row(s) for languages: {escape(found)}")

        trees = build_translation_trees(languages, rows)

        try:
            self.translations_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TranslationFileError(self.translations_dir, f"cannot create directory: {e}") from e

        results = write_language_files(self.translations_dir, trees, self.settings.format)
        for result in results:
            if result.success:
                self.console.print(f"[green]Language {escape(result.language)} file has been saved![/green]")
        return PullResult(languages=list(trees.keys()), results=results)

    def push(self) -> PushResult:
        """Upload every language file to the sheet, aligned to the reference language.

        All files are loaded and validated before the sheet is touched, so a
        broken file aborts the push without writing anything.

        Raises:
            TranslationFileError: If any file cannot be loaded or the reference
                language file is missing
            RemoteError: If the sheet cannot be read or written
        """
        fmt = self.settings.format
        reference = self.settings.reference_language

        flat_maps = load_flat_maps(self.translations_dir, fmt)
        if reference not in flat_maps:
            raise TranslationFileError(
                language_file_path(self.translations_dir, reference, fmt),
                f"reference language '{reference}' file not found"
            )
        self.console.print(f"Loaded {len(flat_maps)} language file(s): {escape(', '.join(flat_maps))}")

        table = project_columns(flat_maps, reference)

        # Blank out anything the previous upload left beyond the new table
        current = self.client.get_values(self.settings.spreadsheet_id, sheet_range(self.settings.sheet_name))
        below_title = current[1:]
        width = max([len(row) for row in below_title] + [0])
        table = pad_columns(table, width, len(below_title))

        target = sheet_range(self.settings.sheet_name, PUSH_ANCHOR_CELL)
        response = self.client.update_values(self.settings.spreadsheet_id, target, table, major_dimension="COLUMNS")

        return PushResult(
            languages=order_languages(flat_maps, reference),
            keys=len(flat_maps[reference]),
            range=response.get("updatedRange", target),
            updated_cells=response.get("updatedCells"),
        )
