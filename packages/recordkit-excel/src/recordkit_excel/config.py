"""Configuration model for spreadsheet record sources.

Provides ``ExcelSourceConfig`` with every tunable parameter and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel

from recordkit_core.models import FormatHint
from recordkit_excel.formats import NumberFormat


class ExcelSourceConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    The format rules are explicit values handed to the converter; set
    ``date_format`` or ``number_format`` to *None* to fall back to direct
    ISO / literal conversion of textual cells.  Textual dates that do not
    match ``date_format`` (e.g. a bare ``"2024-01-02"`` under the default
    pattern) are retried as ISO 8601 before the conversion fails.
    """

    # --- Input ---
    format: FormatHint = FormatHint.AUTODETECT
    max_file_size_mb: int = 100

    # --- Sheet / columns ---
    sheet_selection: str | int | None = None
    use_first_row_as_header: bool = False
    column_names: list[str] | None = None
    column_indexes: list[int] | None = None

    # --- Conversion rules ---
    date_format: str | None = "%Y-%m-%d %H:%M:%S"
    number_format: NumberFormat | None = NumberFormat()

    # --- Logging / PII safety ---
    log_sample_data: bool = False

    @classmethod
    def from_file(cls, path: str) -> ExcelSourceConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install pyyaml"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
