"""xpi-build: package a web extension source directory into an .xpi.

Modules:
    file_filter: which source files go into the archive
    manifest: manifest.json loading and validation
    packager: one packaging pass
    watcher: rebuild-on-change watch sessions
    build: orchestration of the above
"""
