"""Shared fixtures for buildhooks tests"""

from pathlib import Path

import pytest


@pytest.fixture
def solution(tmp_path) -> Path:
    """Empty solution file App.sln in a temporary directory"""
    solution_path = tmp_path / "App.sln"
    solution_path.write_text("")
    return solution_path


@pytest.fixture
def write_script(tmp_path):
    """Write {name}.{phase}.{ext} next to the solution"""
    def _write(phase_label: str, body: str, ext: str = "sh", name: str = "App") -> Path:
        path = tmp_path / f"{name}.{phase_label}.{ext}"
        path.write_text(body)
        return path

    return _write
