"""
Tests for the gangsheet command line.
"""

import json
from urllib.parse import parse_qs, urlsplit

import pytest
from PIL import Image

from gangsheet_toolkit.builder import controller
from gangsheet_toolkit.builder.output import Exporter, PillowRasterRenderer
from gangsheet_toolkit.cli import main


@pytest.fixture
def images(tmp_path):
    paths = []
    for n, size in enumerate([(60, 40), (30, 30), (80, 20)]):
        path = tmp_path / f"art{n}.png"
        Image.new("RGBA", size, (0, 128, 255, 255)).save(path)
        paths.append(path)
    return paths


class TestBuildCommand:
    def test_when_png_build_then_file_written(self, images, tmp_path):
        # Arrange
        out = tmp_path / "sheet.png"

        # Act
        code = main(["build", *map(str, images), "--preset", "11x17", "--dpi", "10", "--output", str(out)])

        # Assert
        assert code == 0
        with Image.open(out) as img:
            assert img.size == (110, 170)

    def test_when_pdf_degrades_then_written_under_png_suffix(self, images, tmp_path, monkeypatch):
        # Arrange: no document renderer, so PDF falls back to PNG
        monkeypatch.setattr(controller, "default_exporter", lambda: Exporter(PillowRasterRenderer(), None))

        # Act
        code = main(["build", str(images[0]), "--preset", "11x17", "--dpi", "10",
                     "--format", "pdf", "--output", str(tmp_path / "sheet.pdf")])

        # Assert
        assert code == 0
        assert not (tmp_path / "sheet.pdf").exists()
        with Image.open(tmp_path / "sheet.png") as img:
            assert img.format == "PNG"

    def test_when_output_is_directory_then_timestamped_name(self, images, tmp_path):
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        code = main(["build", str(images[0]), "--preset", "11x17", "--dpi", "10",
                     "--format", "svg", "--output", str(out_dir)])
        assert code == 0
        (written,) = out_dir.iterdir()
        assert written.name.startswith("gangsheet-") and written.suffix == ".svg"

    def test_when_store_and_share_then_saved_and_link_printed(self, images, tmp_path, capsys):
        store = tmp_path / "projects.json"
        code = main([
            "build", *map(str, images),
            "--preset", "11x17", "--dpi", "10", "--layout", "grid",
            "--output", str(tmp_path / "o.png"),
            "--store", str(store), "--key", "mine",
            "--share-base", "https://example.test/builder",
        ])
        assert code == 0
        saved = json.loads(json.loads(store.read_text(encoding="utf-8"))["mine"])
        assert len(saved["items"]) == 3
        assert saved["view"]["layoutMode"] == "grid"
        url = capsys.readouterr().out.strip()
        assert "design" in parse_qs(urlsplit(url).query)

    def test_when_no_images_readable_then_exit_1(self, tmp_path):
        text = tmp_path / "notes.txt"
        text.write_text("hello", encoding="utf-8")
        assert main(["build", str(text), "--output", str(tmp_path / "x.png")]) == 1

    def test_when_background_invalid_then_exit_2(self, images, tmp_path):
        assert main(["build", str(images[0]), "--background", "blue"]) == 2

    def test_when_unknown_preset_then_argparse_exits(self, images):
        with pytest.raises(SystemExit):
            main(["build", str(images[0]), "--preset", "huge"])
