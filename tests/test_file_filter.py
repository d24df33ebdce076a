import importlib

import pytest

ff = importlib.import_module("xpibuild.file_filter")


@pytest.mark.unit
@pytest.mark.parametrize(
    "path",
    ["ext.xpi", "build/ext.xpi", "a/b/c/archive.zip", "ext.zip"],
)
def test_default_filter_ignores_archives(path):
    assert not ff.FileFilter().want_file(path)


@pytest.mark.unit
@pytest.mark.parametrize(
    "path",
    [".eslintrc", ".git/config", "lib/.DS_Store", "a/.hidden/deep/file.js", "./.env"],
)
def test_default_filter_ignores_hidden_segments(path):
    assert not ff.FileFilter().want_file(path)


@pytest.mark.unit
@pytest.mark.parametrize(
    "path",
    ["manifest.json", "lib/util.js", "icons/icon.48.png", "a.b/c.js", "xpi/readme.txt", "zipper.js"],
)
def test_default_filter_keeps_regular_files(path):
    assert ff.FileFilter().want_file(path)


@pytest.mark.unit
def test_custom_ignore_list_replaces_defaults():
    f = ff.FileFilter(["*.log", "dist/**"])
    assert not f.want_file("debug.log")
    assert not f.want_file("dist/bundle.js")
    # defaults no longer apply
    assert f.want_file(".eslintrc")
    assert f.want_file("ext.xpi")
    # single star stays within one segment
    assert f.want_file("logs/debug.log")


@pytest.mark.unit
def test_first_matching_pattern_wins():
    f = ff.FileFilter(["**/*.js", "lib/**"])
    assert f.matches("lib/util.js") == "**/*.js"
    assert f.matches("lib/data.json") == "lib/**"
    assert f.matches("manifest.json") is None


@pytest.mark.unit
def test_directory_match_covers_contents():
    f = ff.FileFilter(["node_modules"])
    assert not f.want_file("node_modules")
    assert not f.want_file("node_modules/pkg/index.js")
    assert f.want_file("src/node_modules_list.txt")


@pytest.mark.unit
def test_odd_patterns_never_raise():
    f = ff.FileFilter(["[unclosed", "(", "\\"])
    assert f.want_file("manifest.json")
    assert not f.want_file("[unclosed")


@pytest.mark.unit
def test_leading_dot_slash_and_root_slash_are_normalized():
    assert ff.normalize_rel_path("./a/b.js") == "a/b.js"
    assert not ff.FileFilter().want_file("/.git/HEAD")


@pytest.mark.unit
def test_exclusion_is_logged_at_debug(caplog):
    caplog.set_level("DEBUG", logger="xpibuild.file_filter")
    ff.FileFilter().want_file("ext.xpi")
    assert any("Not including file ext.xpi" in r.getMessage() for r in caplog.records)
