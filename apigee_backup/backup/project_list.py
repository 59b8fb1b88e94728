"""
Reader for the project list file.
"""

from pathlib import Path
from typing import List, Union


def read_project_file(file_path: Union[str, Path]) -> List[str]:
    """
    Read project IDs, one per line.

    Whitespace is trimmed and blank lines are dropped. Order and
    duplicates are preserved. IDs are not validated.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(file_path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]
