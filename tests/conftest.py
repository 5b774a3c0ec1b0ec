from __future__ import annotations
import json
from pathlib import Path
import pytest

from clvrw.schema.columns import Column, ColumnsSet

ROOT = Path(__file__).resolve().parent
DATA_DIR = ROOT / "test-files"

@pytest.fixture(scope="session")
def data_dir() -> Path:
    assert DATA_DIR.exists(), f"Missing test data dir: {DATA_DIR}"
    return DATA_DIR

@pytest.fixture
def tmp_out(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d

@pytest.fixture
def ab_columns() -> ColumnsSet:
    return ColumnsSet([Column.create("A", 3), Column.create("B", 2)])

@pytest.fixture
def sample_layout_path(data_dir: Path) -> Path:
    return data_dir / "sample" / "sample_layout.json"

@pytest.fixture
def sample_clv_path(data_dir: Path) -> Path:
    return data_dir / "sample" / "sample.clv"


def load_json(p: Path) -> dict:
    return json.loads(p.read_text(encoding="utf-8"))


def get_manifest(dest: Path) -> dict:
    m = dest / "_manifest.json"
    return json.loads(m.read_text(encoding="utf-8"))
