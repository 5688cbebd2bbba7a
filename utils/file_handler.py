"""
File handling utilities for Solidity sources.
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

logger = logging.getLogger(__name__)


class FileHandler:
    """Read Solidity source files from a file or directory path."""

    # Common Solidity file extensions
    SOLIDITY_EXTENSIONS = {'.sol'}

    def read_contract_files(self, path: Union[str, Path]) -> List[Tuple[str, str]]:
        """
        Read Solidity contract files from a path (file or directory).

        Args:
            path: Path to file or directory containing Solidity files

        Returns:
            List of tuples (file_path, file_content), sorted by path for directories
        """
        target_path = Path(path)

        if not target_path.exists():
            raise FileNotFoundError(f"Path does not exist: {path}")

        if target_path.is_file():
            if not self._is_solidity_file(target_path):
                raise ValueError(f"File is not a Solidity file: {path}")
            return [(str(target_path), self.read_source(target_path))]

        files_data = []
        for sol_file in sorted(target_path.rglob("*.sol")):
            if sol_file.is_file():
                files_data.append((str(sol_file), self.read_source(sol_file)))

        if not files_data:
            raise FileNotFoundError(f"No Solidity files found in: {path}")
        return files_data

    def read_source(self, file_path: Union[str, Path]) -> str:
        """Read file with multiple encoding attempts."""
        encodings = ['utf-8', 'utf-8-sig', 'latin-1']

        for encoding in encodings:
            try:
                with open(file_path, 'r', encoding=encoding) as f:
                    return f.read()
            except UnicodeDecodeError:
                logger.debug(f"{file_path} is not valid {encoding}, trying next encoding")
                continue

        raise UnicodeDecodeError("utf-8", b"", 0, 0, f"Unable to decode {file_path} with any supported encoding")

    def _is_solidity_file(self, file_path: Path) -> bool:
        """Check if file has Solidity extension."""
        return file_path.suffix.lower() in self.SOLIDITY_EXTENSIONS
