"""Test configuration and fixtures for spotty.

Provides builders for DXP containers (zip files holding a manifest and a
script catalog) and isolates configuration and logging state between tests.
All test files should use the fixtures defined here for consistency.
"""

import logging
import warnings
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from spotty.config import ConfigManager
from spotty.core.models import ExtractionOptions

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def manifest_xml(resources: Iterable[Tuple[str, str]]) -> bytes:
    """Build an ``EmbeddedResources.xml`` document from ``(Name, ArchiveElementPath)`` pairs."""
    lines = ['<?xml version="1.0" encoding="utf-8"?>', "<EmbeddedResources>"]
    for name, path in resources:
        lines.append(f'  <EmbeddedResource Name="{name}" ArchiveElementPath="{path}" />')
    lines.append("</EmbeddedResources>")
    return "\n".join(lines).encode("utf-8")


def catalog_xml(scripts: Iterable[Dict[str, str]]) -> bytes:
    """Build an ``EmbeddedScripts.xml`` document.

    Each script dict holds ``name``, ``language`` and ``code`` (inserted as-is,
    so it must already be markup-escaped), plus optional ``version`` and
    ``wrap``.
    """
    lines = ['<?xml version="1.0" encoding="utf-8"?>', "<EmbeddedScripts>"]
    for script in scripts:
        lines.append("  <EmbeddedScript>")
        lines.append(
            f'    <ScriptDefinition Name="{script["name"]}" '
            f'LanguageName="{script["language"]}" '
            f'LanguageVersion="{script.get("version", "1.0")}" '
            f'WrapScript="{script.get("wrap", "false")}">'
        )
        lines.append(f'      <ScriptCode>{script["code"]}</ScriptCode>')
        lines.append("    </ScriptDefinition>")
        lines.append("  </EmbeddedScript>")
    lines.append("</EmbeddedScripts>")
    return "\n".join(lines).encode("utf-8")


def write_container(path: Path, entries: Sequence[Tuple[str, bytes]]) -> Path:
    """Write a zip container with *entries* in the given order (duplicates allowed)."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")  # zipfile warns on duplicate names
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, data in entries:
                zf.writestr(name, data)
    return path


SAMPLE_SCRIPTS: List[Dict[str, str]] = [
    {"name": "calc", "language": "JavaScript", "code": "var x _x09= 1;"},
    {"name": "transform", "language": "IronPython", "version": "2.7", "wrap": "true", "code": "a &gt; b"},
]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point config and log directories at the test's tmp dir and reset shared state."""
    monkeypatch.setenv("SPOTTY_CONFIG_DIR", str(tmp_path / "user-config"))
    monkeypatch.setenv("SPOTTY_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("SPOTTY_DEBUG", raising=False)
    monkeypatch.delenv("SPOTTY_DEBUG_MODULES", raising=False)
    ConfigManager.reset()
    root_logger = logging.getLogger()
    root_handlers, root_level = list(root_logger.handlers), root_logger.level
    yield
    ConfigManager.reset()
    root_logger.handlers[:] = root_handlers
    root_logger.setLevel(root_level)
    # setup_logging() attaches handlers and disables propagation on "spotty"
    spotty_logger = logging.getLogger("spotty")
    for handler in list(spotty_logger.handlers):
        spotty_logger.removeHandler(handler)
        handler.close()
    spotty_logger.propagate = True
    spotty_logger.setLevel(logging.NOTSET)


@pytest.fixture
def options():
    """Options with progress and payload logging enabled."""
    return ExtractionOptions(debug=True, verbose=True)


@pytest.fixture
def build_manifest():
    return manifest_xml


@pytest.fixture
def build_catalog():
    return catalog_xml


@pytest.fixture
def make_container(tmp_path):
    """Factory writing a container below tmp_path from ``(name, bytes)`` entries."""
    def _make(entries: Sequence[Tuple[str, bytes]], name: str = "analysis.dxp") -> Path:
        return write_container(tmp_path / name, entries)
    return _make


@pytest.fixture
def make_dxp(make_container):
    """Factory for a well-formed DXP container holding *scripts*."""
    def _make(scripts: Optional[Iterable[Dict[str, str]]] = None,
              catalog_path: str = "Resources/1.xml",
              name: str = "analysis.dxp") -> Path:
        manifest = manifest_xml([
            ("Thumbnail.png", "Resources/0.png"),
            ("EmbeddedScripts.xml", catalog_path),
        ])
        catalog = catalog_xml(SAMPLE_SCRIPTS if scripts is None else scripts)
        return make_container([
            ("Resources/0.png", b"\x89PNG\r\n\x1a\n"),
            ("EmbeddedResources.xml", manifest),
            (catalog_path, catalog),
        ], name=name)
    return _make


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output"
