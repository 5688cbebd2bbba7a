"""
Shared test fixtures for the GasLens test suite.

Provides sample Solidity sources, temporary source directories and an
isolated configuration file path.
"""

import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


# ── Sample Solidity sources ─────────────────────────────────────

SAMPLE_LOOP_SOLIDITY = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

contract Rewards {
    struct User { uint256 balance; uint256 weight; }
    User public user;
    uint8 public smallNum;

    function accrue(uint256 n) external returns (uint256 total) {
        for (uint256 i = 0; i < n; i++) {
            total += user.balance;
            total += user.balance * user.weight;
        }
    }
}
"""

SAMPLE_CLEAN_SOLIDITY = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

contract Counter {
    uint256 public count;

    function increment() external {
        count += 1;
    }
}
"""


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def tmp_sol_dir():
    """Create a temporary directory with sample Solidity files."""
    with tempfile.TemporaryDirectory(prefix="gaslens_test_") as tmpdir:
        (Path(tmpdir) / "Rewards.sol").write_text(SAMPLE_LOOP_SOLIDITY)
        (Path(tmpdir) / "Counter.sol").write_text(SAMPLE_CLEAN_SOLIDITY)
        yield Path(tmpdir)


@pytest.fixture
def tmp_single_sol():
    """Create a temporary directory with a single Solidity file."""
    with tempfile.TemporaryDirectory(prefix="gaslens_test_") as tmpdir:
        sol_path = Path(tmpdir) / "Rewards.sol"
        sol_path.write_text(SAMPLE_LOOP_SOLIDITY)
        yield sol_path


@pytest.fixture
def isolated_config(tmp_path):
    """Path to a config file that does not exist yet, so defaults apply."""
    return str(tmp_path / "config.yaml")
