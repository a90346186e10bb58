"""
Tests for the standalone plotter tool (`tools/plotter.py`).

This module contains integration tests that execute the plotter tool as a
subprocess, simulating real-world command-line usage. It verifies that the
tool can correctly parse arguments, read day buckets, and generate plot files.
"""

import os
import subprocess
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from trafficmon.models.samples import RateSample
from trafficmon.storage import TrafficStore

# --- Test Fixtures ---


@pytest.fixture
def plotter_test_env_factory(tmp_path: Path) -> Callable[[List[str]], Path]:
    """
    A factory fixture to create a data directory for the plotter tool.

    The returned function takes a list of ISO dates and writes a day bucket
    for each, holding a minute of samples for one busy interface, one idle
    interface and one disk.
    """

    def _create_env(days: List[str]) -> Path:
        data_dir = tmp_path / "traffic"
        store = TrafficStore(data_dir)

        for day in days:
            start = datetime.fromisoformat(day).replace(hour=10)
            samples = []
            for i in range(60):
                ts = start + timedelta(seconds=i)
                samples.extend([
                    RateSample(ts, "eth0", "network", speed_in=1000.0 + i, speed_out=200.0,
                               bytes_in=1000 * i, bytes_out=200 * i),
                    RateSample(ts, "eth1", "network"),
                    RateSample(ts, "sda", "disk", speed_in=4096.0, speed_out=8192.0,
                               bytes_in=4096 * i, bytes_out=8192 * i),
                ])
            store.append_many(samples)
        return data_dir

    return _create_env


# --- Test Cases ---


def run_plotter_tool(
    data_dir: Path, extra_args: Optional[list[str]] = None
) -> subprocess.CompletedProcess:
    """Helper function to execute the plotter.py script as a subprocess."""
    if extra_args is None:
        extra_args = []

    project_root = Path(__file__).parent.parent
    package_root = project_root / "src"
    plotter_script_path = project_root / "tools" / "plotter.py"
    command = [
        sys.executable,
        str(plotter_script_path),
        "--data-dir",
        str(data_dir),
    ] + extra_args

    env = os.environ.copy()
    python_path = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = f"{package_root}{os.pathsep}{python_path}"

    result = subprocess.run(command, capture_output=True, text=True, env=env)
    return result


def find_file_by_suffix(directory: Path, suffix: str) -> Path:
    """Helper to find the first file in a directory with a given suffix."""
    try:
        return next(directory.glob(f"**/*{suffix}"))
    except StopIteration:
        raise FileNotFoundError(f"No file with suffix '{suffix}' found in {directory}")


def test_plotter_basic_run(plotter_test_env_factory: Callable[[List[str]], Path]):
    """
    Tests the default behavior: one speed plot per stored day.
    """
    data_dir = plotter_test_env_factory(["2025-01-14", "2025-01-15"])
    result = run_plotter_tool(data_dir)

    assert result.returncode == 0, (
        f"Plotter tool failed!\nSTDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}"
    )
    assert (data_dir / "traffic_2025-01-14_speed_plot.html").exists()
    assert (data_dir / "traffic_2025-01-15_speed_plot.html").exists()
    assert "Found 2 day bucket(s) to plot." in result.stdout


def test_plotter_single_day_and_class(
    plotter_test_env_factory: Callable[[List[str]], Path], tmp_path: Path
):
    """
    Tests the `--date`, `--resource-class` and `--output-dir` arguments.
    """
    data_dir = plotter_test_env_factory(["2025-01-14", "2025-01-15"])
    out_dir = tmp_path / "plots"
    result = run_plotter_tool(
        data_dir,
        extra_args=[
            "--date", "2025-01-15",
            "--resource-class", "disk",
            "--output-dir", str(out_dir),
            "--resample-interval", "10s",
        ],
    )

    assert result.returncode == 0, result.stderr
    assert (out_dir / "traffic_2025-01-15_disk_speed_plot.html").exists()
    with pytest.raises(FileNotFoundError):
        find_file_by_suffix(out_dir, "2025-01-14_disk_speed_plot.html")


def test_plotter_idle_resources_left_out(
    plotter_test_env_factory: Callable[[List[str]], Path]
):
    """
    An interface that never moved a byte does not get a trace.
    """
    data_dir = plotter_test_env_factory(["2025-01-15"])
    result = run_plotter_tool(data_dir, extra_args=["--resource-class", "network"])

    assert result.returncode == 0, result.stderr
    html = (data_dir / "traffic_2025-01-15_network_speed_plot.html").read_text()
    assert "eth0 in" in html
    assert "eth1 in" not in html


def test_plotter_invalid_resample_interval(
    plotter_test_env_factory: Callable[[List[str]], Path]
):
    data_dir = plotter_test_env_factory(["2025-01-15"])
    result = run_plotter_tool(data_dir, extra_args=["--resample-interval", "fast"])

    assert result.returncode == 1
    assert "Invalid resample interval format" in result.stdout


def test_plotter_no_data_graceful_exit(tmp_path: Path):
    """
    Tests that the plotter exits gracefully when the data directory is empty.
    """
    data_dir = tmp_path / "empty_data_dir"
    data_dir.mkdir()
    result = run_plotter_tool(data_dir)

    assert result.returncode == 0
    assert "No traffic data files found" in result.stdout


def test_plotter_summary_plot_generation(
    plotter_test_env_factory: Callable[[List[str]], Path],
):
    """
    Tests the `--summary-plot` feature.

    It verifies that the plotter builds a single daily totals chart and
    skips the per-day speed plots in this mode.
    """
    data_dir = plotter_test_env_factory(["2025-01-13", "2025-01-14", "2025-01-15"])

    result = run_plotter_tool(data_dir, extra_args=["--summary-plot"])

    assert result.returncode == 0, (
        f"Plotter tool failed for summary plot!\nSTDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}"
    )
    assert (data_dir / "traffic_daily_summary_plot.html").exists()
    with pytest.raises(FileNotFoundError):
        find_file_by_suffix(data_dir, "_speed_plot.html")
