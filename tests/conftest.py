"""
Pytest configuration and shared fixtures for the gputil test suite.

This module provides sample tool output, temporary configuration files and
stand-in diagnostics tools for all test modules.
"""

import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Sample Tool Output
# ============================================================================

# index, uuid, utilization.gpu, memory.total, memory.used, memory.free,
# driver_version, name, gpu_serial, power.draw, power.limit, temperature.gpu, timestamp
DEVICE_CSV = """
0, GPU-fd189414-e0f6-58a0-7031-fefe0ce43b1d, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321923001828, 61.27, 400.00, 31, 2024/03/08 13:49:22.063
1, GPU-121ebc1f-3e5d-139d-7aac-57311d5bafc7, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321923003018, 60.11, 400.00, 30, 2024/03/08 13:49:22.064
2, GPU-b74d1aeb-0aab-b3ca-ff55-94e24cbe0cd6, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321423018183, 59.86, 400.00, 30, 2024/03/08 13:49:22.065
3, GPU-401e53f2-8f44-1fc5-469d-8e36c1d6c9c5, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321923002415, 62.40, 400.00, 30, 2024/03/08 13:49:22.065
4, GPU-8b63b1f2-98e1-b24e-f59f-d725d51b3a2b, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321923000426, 64.02, 400.00, 42, 2024/03/08 13:49:22.066
5, GPU-67fc57fc-34ad-4126-2f66-0b8d29144c75, 100, 81920, 74745, 6483, 535.104.12, NVIDIA A800-SXM4-80GB, 1321923001319, 359.75, 400.00, 73, 2024/03/08 13:49:22.067
6, GPU-105ee81f-dddd-aaf0-2e30-ca1593fdbf18, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321923002833, 60.95, 400.00, 30, 2024/03/08 13:49:22.068
7, GPU-349fa89c-151d-340e-c147-94506daf1357, 0, 81920, 2, 81226, 535.104.12, NVIDIA A800-SXM4-80GB, 1321823066087, 61.50, 400.00, 32, 2024/03/08 13:49:22.069
"""

# timestamp, gpu_name, gpu_uuid, pid, name, used_memory
COMPUTE_CSV = """
2024/03/08 16:05:13.791, NVIDIA A800-SXM4-80GB, GPU-67fc57fc-34ad-4126-2f66-0b8d29144c75, 44141, /opt/miniconda/bin/python, 74736
"""


@pytest.fixture
def device_csv() -> bytes:
    """The 8-device A800 sample as the tool prints it."""
    return DEVICE_CSV.encode()


@pytest.fixture
def compute_csv() -> bytes:
    """A single compute process sample as the tool prints it."""
    return COMPUTE_CSV.encode()


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "query": {
            "binary": "nvidia-smi",
            "timeout_seconds": 5.0,
            "poll_interval_seconds": 0.05,
            "termination_timeout_seconds": 2.0,
        },
        "logging": {
            "level": "debug",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    config_path = temp_dir / "config.toml"
    with open(config_path, "w") as f:
        toml.dump(sample_config_data, f)
    return config_path


@pytest.fixture
def fake_tool(temp_dir):
    """
    Factory for executable shell scripts standing in for nvidia-smi.

    The script ignores its arguments and runs the given shell body.
    """
    if os.name != "posix" or shutil.which("sh") is None:
        pytest.skip("stand-in tools require a POSIX shell")

    counter = {"n": 0}

    def _make(body: str) -> str:
        counter["n"] += 1
        script = temp_dir / f"fake-nvidia-smi-{counter['n']}"
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture(autouse=True)
def reset_config_after_test():
    """Automatically restore the default configuration after each test."""
    yield

    from gputil.config import reset_config_path

    reset_config_path()
