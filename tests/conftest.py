# tests/conftest.py
"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
from pathlib import Path
import numpy as np

import npzio


@pytest.fixture(scope="session")
def sample_npz(tmp_path_factory) -> Path:
    """
    A pytest fixture that creates a standard three-member .npz file.
    This runs only once per test session and provides the file path to tests.
    """
    filepath = tmp_path_factory.getbasetemp() / "sample_standard.npz"
    npzio.write(
        filepath,
        {
            # x: INT64 vector
            "x": np.arange(10, dtype=np.int64),
            # y: FLOAT32 matrix
            "y": np.linspace(0, 1, 6, dtype=np.float32).reshape(2, 3),
            # z: zero-dimensional FLOAT64
            "z": 3.0,
        },
    )
    return filepath


@pytest.fixture(scope="session")
def numpy_npz(tmp_path_factory) -> Path:
    """
    Creates a deflated .npz file with NumPy's own writer, including a
    Fortran-ordered array, a big-endian array, and a 0-d array.
    """
    filepath = tmp_path_factory.getbasetemp() / "numpy_written.npz"
    np.savez_compressed(
        filepath,
        fortran=np.asfortranarray(np.arange(12, dtype=np.int16).reshape(3, 4)),
        big=np.arange(5, dtype=">f8"),
        flags=np.array([True, False, True]),
        zero_d=np.array(7, dtype=np.uint32),
    )
    return filepath
