# o2cm_couples/storage/report_writer.py
import os
from pathlib import Path
from typing import Union

from loguru import logger


class PersistenceError(Exception):
    """Raised when a report or raw page cannot be written to disk."""

    pass


def save_report(text: str, path: Union[str, Path]) -> Path:
    """Overwrites ``path`` with the plain-text report, using \\n line endings."""
    output_path = Path(path)
    try:
        with open(output_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise PersistenceError(f"Failed to write output to {output_path}: {e}") from e
    logger.debug(f"Wrote {len(text)} characters to {output_path}")
    return output_path


def _safe_filename_part(value: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in value)


def save_raw_response(
    html: str, directory: Union[str, Path], event_key: str, competitor_id: str
) -> Path:
    """Saves one fetched competitor page, for debugging parser issues."""
    filename = (
        Path(directory)
        / f"{_safe_filename_part(event_key)}_{_safe_filename_part(competitor_id)}.html"
    )
    try:
        os.makedirs(directory, exist_ok=True)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(html)
    except OSError as e:
        raise PersistenceError(f"Failed to save raw response to {filename}: {e}") from e
    logger.debug(f"Saved raw response for competitor {competitor_id} to {filename}")
    return filename
