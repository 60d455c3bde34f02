from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def read_data():
    def _read(name: str) -> str:
        return (DATA_DIR / name).read_text()
    return _read
