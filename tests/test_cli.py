"""
CLI Tests
=========

Exit codes and partial-output handling of the slideshow-video command.
"""

import json

import pytest

from slideshow_video.cli import EXIT_FAILED, EXIT_OK, EXIT_USAGE, build_parser, main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run from an empty directory so no stray config.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    for var in ("SLIDESHOW_CONFIG", "SLIDESHOW_REMOVE_PARTIAL", "SLIDESHOW_CREATE_DIRS"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def write_inputs(workdir, archive_bytes, frames):
    archive = workdir / "slides.zip"
    archive.write_bytes(archive_bytes)
    manifest = workdir / "manifest.json"
    manifest.write_text(json.dumps({"frames": frames}), encoding="utf-8")
    return archive, manifest


class TestParser:
    """Argument parsing."""

    def test_output_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.zip", "m.json"])

    def test_arguments(self):
        args = build_parser().parse_args(
            ["a.zip", "m.json", "-o", "out.mp4", "--log-level", "DEBUG"]
        )
        assert str(args.output) == "out.mp4"
        assert args.log_level == "DEBUG"
        assert args.config is None


class TestMain:
    """End-to-end runs of main()."""

    def test_success(self, require_h264, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [
            {"filename": "001.png", "delay": 100},
            {"filename": "002.png", "delay": 200},
        ])
        output = workdir / "nested" / "out.mp4"

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_OK
        assert output.stat().st_size > 0

    def test_missing_archive(self, workdir):
        manifest = workdir / "manifest.json"
        manifest.write_text('{"frames": []}', encoding="utf-8")

        code = main([str(workdir / "missing.zip"), str(manifest), "-o", str(workdir / "o.mp4")])

        assert code == EXIT_USAGE

    def test_invalid_manifest(self, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [{"filename": "001.png", "delay": 0}])

        code = main([str(archive), str(manifest), "-o", str(workdir / "o.mp4")])

        assert code == EXIT_USAGE

    def test_malformed_manifest_json(self, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [])
        manifest.write_text("{not json", encoding="utf-8")

        code = main([str(archive), str(manifest), "-o", str(workdir / "o.mp4")])

        assert code == EXIT_USAGE

    def test_empty_manifest_fails(self, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [])
        output = workdir / "o.mp4"

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_FAILED
        assert not output.exists()

    def test_empty_manifest_keeps_existing_file(self, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [])
        output = workdir / "keep.mp4"
        output.write_bytes(b"user data")

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_FAILED
        assert output.read_bytes() == b"user data"

    def test_missing_first_entry_keeps_existing_file(self, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [
            {"filename": "nope.png", "delay": 10},
        ])
        output = workdir / "keep.mp4"
        output.write_bytes(b"user data")

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_FAILED
        assert output.read_bytes() == b"user data"

    def test_empty_manifest_creates_no_directories(self, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [])
        output = workdir / "nested" / "o.mp4"

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_FAILED
        assert not output.parent.exists()

    def test_partial_output_removed(self, require_h264, workdir, png_archive):
        archive, manifest = write_inputs(workdir, png_archive, [
            {"filename": "001.png", "delay": 100},
            {"filename": "gone.png", "delay": 100},
        ])
        output = workdir / "o.mp4"

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_FAILED
        assert not output.exists()

    def test_partial_output_kept_when_disabled(self, require_h264, workdir, png_archive, monkeypatch):
        monkeypatch.setenv("SLIDESHOW_REMOVE_PARTIAL", "false")
        archive, manifest = write_inputs(workdir, png_archive, [
            {"filename": "001.png", "delay": 100},
            {"filename": "gone.png", "delay": 100},
        ])
        output = workdir / "o.mp4"

        code = main([str(archive), str(manifest), "-o", str(output)])

        assert code == EXIT_FAILED
        assert output.exists()
