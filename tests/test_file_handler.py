"""
Tests for file handling utilities.
"""

import pytest
from pathlib import Path

from utils.file_handler import FileHandler


class TestFileHandler:
    """Test cases for FileHandler."""

    def setup_method(self):
        """Set up test fixtures."""
        self.file_handler = FileHandler()

    def test_read_solidity_file(self, tmp_path):
        """Test reading a valid Solidity file."""
        test_content = '''
pragma solidity ^0.8.0;

contract TestContract {
    uint256 public value;
}
'''
        test_file = tmp_path / "TestContract.sol"
        test_file.write_text(test_content)

        files_data = self.file_handler.read_contract_files(str(test_file))

        assert len(files_data) == 1
        assert files_data[0][0] == str(test_file)
        assert files_data[0][1] == test_content

    def test_read_nonexistent_file(self):
        """Test reading a nonexistent file."""
        with pytest.raises(FileNotFoundError):
            self.file_handler.read_contract_files("nonexistent.sol")

    def test_reject_non_solidity_file(self, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("not a contract")
        with pytest.raises(ValueError):
            self.file_handler.read_contract_files(str(notes))

    def test_read_directory_sorted_and_recursive(self, tmp_path):
        """Test reading a directory containing Solidity files."""
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "Zeta.sol").write_text("contract Zeta {}")
        (tmp_path / "Alpha.sol").write_text("contract Alpha {}")
        (tmp_path / "README.md").write_text("# docs")

        files_data = self.file_handler.read_contract_files(tmp_path)

        names = [Path(f[0]).name for f in files_data]
        assert names == ["Alpha.sol", "Zeta.sol"]

    def test_directory_without_sources(self, tmp_path):
        (tmp_path / "README.md").write_text("# docs")
        with pytest.raises(FileNotFoundError):
            self.file_handler.read_contract_files(tmp_path)

    def test_latin1_fallback(self, tmp_path):
        test_file = tmp_path / "Legacy.sol"
        test_file.write_bytes("// caf\xe9\ncontract Legacy {}".encode("latin-1"))

        content = self.file_handler.read_source(test_file)

        assert "caf\xe9" in content
        assert "contract Legacy" in content

    def test_utf8_bom_is_read(self, tmp_path):
        test_file = tmp_path / "Bom.sol"
        test_file.write_bytes(b"\xef\xbb\xbfcontract Bom {}")

        assert "contract Bom" in self.file_handler.read_source(test_file)

    def test_uppercase_extension(self, tmp_path):
        test_file = tmp_path / "Upper.SOL"
        test_file.write_text("contract Upper {}")

        assert len(self.file_handler.read_contract_files(test_file)) == 1
