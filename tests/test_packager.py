import io
import zipfile

import pytest

from xpibuild.logger import ManifestError, PackageIOError
from xpibuild.manifest import ManifestInfo
from xpibuild.packager import Packager, PackagingResult, package_file_name, safe_file_name
from xpibuild.file_filter import FileFilter
from xpibuild.zip_dir import zip_dir


def _names(path):
    with zipfile.ZipFile(path) as zf:
        return sorted(zf.namelist())


@pytest.mark.unit
def test_safe_file_name():
    assert safe_file_name("My-Ext-1.0.xpi") == "my-ext-1.0.xpi"
    assert safe_file_name("Ext With Spaces!-2.0.xpi") == "ext_with_spaces_-2.0.xpi"
    assert safe_file_name("a  /\\b") == "a_b"


@pytest.mark.unit
def test_package_file_name_is_deterministic():
    info = ManifestInfo(name="Ext With Spaces!", version="2.0", application_id="x@y")
    assert package_file_name(info) == "ext_with_spaces_-2.0.xpi"
    assert package_file_name(info) == package_file_name(info)


@pytest.mark.unit
def test_produce_artifact_writes_filtered_package(extension_dir, tmp_path):
    artifacts = tmp_path / "out" / "nested"
    result = Packager(extension_dir, artifacts).produce_artifact()

    assert result == PackagingResult(artifact_path=artifacts / "ext-1.2.xpi")
    assert result.artifact_path.is_file()
    assert _names(result.artifact_path) == ["background.js", "lib/util.js", "manifest.json"]


@pytest.mark.unit
def test_second_pass_overwrites_same_path(extension_dir, tmp_path):
    artifacts = tmp_path / "artifacts"
    packager = Packager(extension_dir, artifacts)

    first = packager.produce_artifact()
    first_bytes = first.artifact_path.read_bytes()
    (extension_dir / "content.js").write_text("document.title = 'x';\n")
    second = packager.produce_artifact()

    assert second.artifact_path == first.artifact_path
    assert list(artifacts.iterdir()) == [second.artifact_path]
    data = second.artifact_path.read_bytes()
    assert data != first_bytes
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.testzip() is None
        assert "content.js" in zf.namelist()


@pytest.mark.unit
def test_archive_is_reproducible(extension_dir):
    f = FileFilter()
    assert zip_dir(extension_dir, filter=f.want_file) == zip_dir(extension_dir, filter=f.want_file)


@pytest.mark.unit
def test_injected_manifest_data_skips_manifest_file(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.js").write_text("1\n")
    data = {"name": "Injected", "version": "3", "applications": {"gecko": {"id": "i@x"}}}

    result = Packager(src, tmp_path / "a", manifest_data=data).produce_artifact()

    assert result.artifact_path.name == "injected-3.xpi"
    assert _names(result.artifact_path) == ["index.js"]


@pytest.mark.unit
def test_custom_file_filter_is_consulted(extension_dir, tmp_path):
    seen = []

    class Recording(FileFilter):
        def want_file(self, rel_path):
            seen.append(rel_path)
            return super().want_file(rel_path)

    result = Packager(extension_dir, tmp_path / "a", file_filter=Recording(["lib"])).produce_artifact()

    assert "lib" in seen
    assert "lib/util.js" not in seen  # pruned with its directory
    assert "lib/util.js" not in _names(result.artifact_path)
    assert ".eslintrc" in _names(result.artifact_path)


@pytest.mark.unit
def test_invalid_manifest_aborts_before_writing(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "manifest.json").write_text("{}")
    artifacts = tmp_path / "artifacts"

    with pytest.raises(ManifestError):
        Packager(src, artifacts).produce_artifact()
    assert not artifacts.exists()


@pytest.mark.unit
def test_artifacts_path_that_is_a_file(extension_dir, tmp_path):
    blocker = tmp_path / "artifacts"
    blocker.write_text("not a dir")

    with pytest.raises(PackageIOError, match="not a directory"):
        Packager(extension_dir, blocker).produce_artifact()


@pytest.mark.unit
def test_write_failure_is_package_io_error(extension_dir, tmp_path):
    artifacts = tmp_path / "artifacts"
    artifacts.mkdir()
    # A directory occupying the output name makes open() fail
    (artifacts / "ext-1.2.xpi").mkdir()

    with pytest.raises(PackageIOError, match="Could not write"):
        Packager(extension_dir, artifacts).produce_artifact()


@pytest.mark.unit
def test_success_is_logged(extension_dir, tmp_path, caplog):
    caplog.set_level("INFO", logger="xpibuild.packager")
    result = Packager(extension_dir, tmp_path / "a").produce_artifact()
    assert any(
        f"Your web extension is ready: {result.artifact_path}" in r.getMessage()
        for r in caplog.records
    )
