"""End-to-end tests of the extraction pipeline on generated DXP containers."""

import pytest

from spotty.core.exceptions import (
    EntryNotFoundError,
    MarkupParseError,
    ResourceNotFoundError,
    ScriptsNotFoundError,
)
from spotty.core.services import ExtractionService


def _files(root):
    if not root.exists():
        return []
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.mark.integration
class TestExtractionPipeline:
    """Successful runs."""

    def test_extracts_all_scripts(self, make_dxp, output_dir, options):
        report = ExtractionService(options).extract(make_dxp(), output_dir)

        assert report.count == 2
        assert report.script_manifest_path == "Resources/1.xml"
        assert _files(output_dir) == ["js/calc.js", "python/transform.py"]
        assert (output_dir / "js" / "calc.js").read_text(encoding="utf-8") == "var x \t= 1;"
        assert (output_dir / "python" / "transform.py").read_text(encoding="utf-8") == "a > b"

    @pytest.mark.parametrize("count", [1, 3, 10])
    def test_one_file_per_script(self, make_dxp, output_dir, count):
        scripts = [
            {"name": f"script_{i}", "language": ["JavaScript", "IronPython", "TERR"][i % 3], "code": str(i)}
            for i in range(count)
        ]
        report = ExtractionService().extract(make_dxp(scripts), output_dir)
        assert report.count == count
        assert len(_files(output_dir)) == count
        assert report.written == [p for p in report.written if p.exists()]

    def test_unmapped_language_uses_its_name(self, make_dxp, output_dir):
        scripts = [{"name": "model", "language": "TERR", "code": "y &lt;- x"}]
        ExtractionService().extract(make_dxp(scripts), output_dir)
        assert (output_dir / "TERR" / "model.TERR").read_text(encoding="utf-8") == "y <- x"

    def test_stored_text_reaches_the_file(self, make_dxp, output_dir):
        scripts = [{
            "name": "windows",
            "language": "IronPython",
            "code": "if a &gt; b:\r\n_x09print(&quot;&#60;&quot;)\r\n",
        }]
        ExtractionService().extract(make_dxp(scripts), output_dir)
        assert (output_dir / "python" / "windows.py").read_bytes() == (
            b'if a > b:\r\n\tprint(&quot;&#60;&quot;)\r\n'
        )

    def test_catalog_at_arbitrary_path(self, make_dxp, output_dir):
        container = make_dxp(catalog_path="Some/Deep/Path/7.xml")
        report = ExtractionService().extract(container, output_dir)
        assert report.script_manifest_path == "Some/Deep/Path/7.xml"
        assert report.count == 2

    def test_load_scripts_does_not_write(self, make_dxp, output_dir):
        records = ExtractionService().load_scripts(make_dxp())
        assert [(r.name, r.language_name, r.code) for r in records] == [
            ("calc", "JavaScript", "var x _x09= 1;"),
            ("transform", "IronPython", "a &gt; b"),
        ]
        assert records[1].wrap_script is True
        assert records[1].language_version == "2.7"
        assert not output_dir.exists()


@pytest.mark.integration
class TestExtractionFailures:
    """Failed runs stop before anything is written."""

    def test_missing_manifest_entry(self, make_container, output_dir):
        container = make_container([("Resources/1.xml", b"<EmbeddedScripts/>")])
        with pytest.raises(EntryNotFoundError) as excinfo:
            ExtractionService().extract(container, output_dir)
        assert excinfo.value.entry_path == "EmbeddedResources.xml"
        assert _files(output_dir) == []

    def test_missing_catalog_entry(self, make_container, build_manifest, output_dir):
        container = make_container([
            ("EmbeddedResources.xml", build_manifest([("EmbeddedScripts.xml", "Resources/9.xml")])),
        ])
        with pytest.raises(EntryNotFoundError) as excinfo:
            ExtractionService().extract(container, output_dir)
        assert excinfo.value.entry_path == "Resources/9.xml"
        assert _files(output_dir) == []

    def test_manifest_without_scripts_resource(self, make_container, build_manifest, output_dir):
        container = make_container([
            ("EmbeddedResources.xml", build_manifest([("Thumbnail.png", "Resources/0.png")])),
        ])
        with pytest.raises(ResourceNotFoundError):
            ExtractionService().extract(container, output_dir)
        assert _files(output_dir) == []

    def test_empty_catalog(self, make_dxp, output_dir):
        with pytest.raises(ScriptsNotFoundError):
            ExtractionService().extract(make_dxp(scripts=[]), output_dir)
        assert _files(output_dir) == []

    def test_malformed_catalog(self, make_container, build_manifest, output_dir):
        container = make_container([
            ("EmbeddedResources.xml", build_manifest([("EmbeddedScripts.xml", "Resources/1.xml")])),
            ("Resources/1.xml", b"<EmbeddedScripts><EmbeddedScript>"),
        ])
        with pytest.raises(MarkupParseError):
            ExtractionService().extract(container, output_dir)
        assert _files(output_dir) == []

    def test_malformed_manifest(self, make_container, output_dir):
        container = make_container([("EmbeddedResources.xml", b"\x00\x01 binary")])
        with pytest.raises(MarkupParseError):
            ExtractionService().extract(container, output_dir)
        assert _files(output_dir) == []
