"""Reading and validating redirect CSV files."""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ...errors import InputFileError, InputValidationError

logger = logging.getLogger(__name__)

REDIRECT_TYPES = ('PERMANENT', 'TEMPORARY')


@dataclass
class Redirect:
    """A single redirect rule."""

    from_path: str
    to_path: str
    type: str  # 'PERMANENT' or 'TEMPORARY'
    end_date: Optional[str] = None

    def to_input(self) -> Dict[str, str]:
        """Shape expected by the rewriter API."""
        data = {'from': self.from_path, 'to': self.to_path, 'type': self.type}
        if self.end_date:
            data['endDate'] = self.end_date
        return data


def read_csv(path: str, delimiter: str = ',') -> Tuple[List[Dict[str, str]], bytes]:
    """
    Read a redirects CSV file.

    Args:
        path: Path to the CSV file
        delimiter: Field delimiter

    Returns:
        Tuple of (rows as dicts keyed by header, raw file bytes)

    Raises:
        InputFileError: If the file cannot be read or is not UTF-8 CSV
    """
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise InputFileError(f"Could not read {path}: {e.strerror or e}") from e

    try:
        text = raw.decode('utf-8-sig')
        reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
        # Surplus fields are collected under the None key; they are ignored
        rows = [
            {key.strip(): (value or '').strip() for key, value in row.items() if key is not None}
            for row in reader
        ]
    except UnicodeDecodeError as e:
        raise InputFileError(f"{path} is not a UTF-8 file: {e.reason} at byte {e.start}") from e
    except csv.Error as e:
        raise InputFileError(f"{path} is not a valid CSV file: {e}") from e

    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows, raw


def validate_redirects(rows: List[Dict[str, str]]) -> List[Redirect]:
    """
    Check every row and build Redirects.

    All rows are checked before anything is returned, so a bad file is
    rejected before any redirect is imported.

    Raises:
        InputValidationError: Listing every invalid row (1-based file line)
    """
    problems = []
    redirects = []

    for index, row in enumerate(rows):
        line = index + 2  # header is line 1
        from_path = row.get('from')
        to_path = row.get('to')
        redirect_type = row.get('type')

        if not from_path:
            problems.append((line, "missing 'from'"))
        if not to_path:
            problems.append((line, "missing 'to'"))
        if redirect_type not in REDIRECT_TYPES:
            problems.append((line, f"'type' must be one of {', '.join(REDIRECT_TYPES)}, got {redirect_type!r}"))

        if from_path and to_path and redirect_type in REDIRECT_TYPES:
            redirects.append(Redirect(
                from_path=from_path,
                to_path=to_path,
                type=redirect_type,
                end_date=row.get('endDate') or None,
            ))

    if problems:
        raise InputValidationError(problems)

    return redirects
