import json
import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so `import xpibuild...` works locally
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


MINIMAL_MANIFEST = {
    "manifest_version": 2,
    "name": "ext",
    "version": "1.2",
    "applications": {"gecko": {"id": "ext@example.com"}},
}


@pytest.fixture
def minimal_manifest():
    return json.loads(json.dumps(MINIMAL_MANIFEST))


@pytest.fixture
def extension_dir(tmp_path, minimal_manifest):
    """A small extension source tree with a few files that must be ignored."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "manifest.json").write_text(json.dumps(minimal_manifest))
    (src / "background.js").write_text("console.log('bg');\n")
    (src / "lib").mkdir()
    (src / "lib" / "util.js").write_text("export const x = 1;\n")
    (src / ".git").mkdir()
    (src / ".git" / "config").write_text("[core]\n")
    (src / ".eslintrc").write_text("{}\n")
    (src / "old-build.xpi").write_bytes(b"PK\x05\x06" + b"\x00" * 18)
    (src / "lib" / "vendor.zip").write_bytes(b"PK\x05\x06" + b"\x00" * 18)
    return src
