"""
Pytest fixtures and configuration for the test suite.

Files are written as raw bytes so tests can assert encoding, BOM and
newline fidelity byte for byte.
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Add project root to path so tests can import linewise package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from linewise.helpers.dto.config_dto import EngineConfig  # noqa: E402
from linewise.services.text_file_svc import TextFileService  # noqa: E402

FIVE_LINES_CRLF = b"Line1\r\nLine2\r\nLine3\r\nLine4\r\nLine5\r\n"


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration with ANSI highlighting off for readable assertions."""
    return EngineConfig(highlight=False)


@pytest.fixture
def service(engine_config: EngineConfig) -> TextFileService:
    return TextFileService(config=engine_config)


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing raw bytes to a file under tmp_path."""

    def _make(data: bytes, name: str = "sample.txt") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _make


@pytest.fixture
def five_line_crlf(make_file: Callable[..., Path]) -> Path:
    """Line1..Line5 with CRLF terminators and a trailing newline."""
    return make_file(FIVE_LINES_CRLF, "five.txt")


@pytest.fixture
def numbered_file(make_file: Callable[..., Path]) -> Callable[[int], Path]:
    """Factory for an LF file with lines "line 1" .. "line N"."""

    def _make(count: int) -> Path:
        data = "".join(f"line {i}\n" for i in range(1, count + 1)).encode("ascii")
        return make_file(data, f"numbered_{count}.txt")

    return _make


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[Path, None, None]:
    """Run with no LINEWISE_* variables and an empty working directory."""
    import os

    for key in list(os.environ):
        if key.startswith("LINEWISE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def backups_of() -> Callable[[Path], list[Path]]:
    """Lists timestamped backups written next to a file."""

    def _list(path: Path) -> list[Path]:
        return sorted(path.parent.glob(f"{path.name}.*.bak"))

    return _list


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: fast isolated tests of one module")
    config.addinivalue_line("markers", "scenario: end-to-end behaviour through the service facade")
