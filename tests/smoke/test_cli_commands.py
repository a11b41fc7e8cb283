"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(args: list[str], timeout: int = 60) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m src.cli.main'
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    result = subprocess.run(
        [sys.executable, "-m", "src.cli.main", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should list the commands."""
        code, stdout, stderr = run_cli_command(["--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "simulate" in stdout
        assert "clusters" in stdout

    def test_simulate_help(self):
        code, stdout, stderr = run_cli_command(["simulate", "--help"])

        assert code == 0, f"Simulate help failed: {stderr}"


class TestCLIClusters:
    """Test clusters command."""

    def test_clusters_on_grid(self):
        code, stdout, stderr = run_cli_command(["clusters", "--grid", "12"])

        assert code == 0, f"Clusters failed with: {stderr}"
        assert "item-0" in stdout

    def test_clusters_from_file(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text(json.dumps([{"label": f"w{i}", "x": i % 3, "y": i // 3} for i in range(9)]))

        code, stdout, stderr = run_cli_command(
            ["clusters", "--items", str(path), "--method", "random_clusters", "--clusters", "3"]
        )

        assert code == 0, f"Clusters failed with: {stderr}"
        assert "3 clusters" in stdout


class TestCLISimulate:
    """Test simulate command."""

    def test_random_method(self):
        code, stdout, stderr = run_cli_command(
            ["simulate", "--grid", "3", "--method", "random", "--passes", "2"]
        )

        assert code == 0, f"Simulate failed with: {stderr}"
        assert "Presentations: 6" in stdout
        assert "Answers per item: 2" in stdout

    def test_kmeans_method(self):
        code, stdout, stderr = run_cli_command(
            ["simulate", "--grid", "8", "--method", "kmeans", "--rounds", "1", "--show", "0"]
        )

        assert code == 0, f"Simulate failed with: {stderr}"
        assert "Presentations: 8" in stdout
        assert "Back-to-back repeats: 0" in stdout

    def test_missing_items_file(self, tmp_path):
        code, stdout, stderr = run_cli_command(
            ["simulate", "--items", str(tmp_path / "missing.json")]
        )

        assert code == 1
        assert "Could not load items" in stdout

    def test_invalid_rounds(self):
        code, stdout, stderr = run_cli_command(["simulate", "--rounds", "4,x"])

        assert code == 1
        assert "Invalid round schedule" in stdout
