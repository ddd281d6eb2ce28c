import json

import piexif
from PIL import Image

import cli
from conftest import StubLookup, make_exif
from core import ExifDataParser


def stub_parser_factory():
    return ExifDataParser(timezone_lookup=StubLookup(""))


class TestFindImages:
    def test_filters_extensions(self, tmp_path):
        (tmp_path / "b.jpg").write_bytes(b"")
        (tmp_path / "a.PNG").write_bytes(b"")
        (tmp_path / "notes.txt").write_bytes(b"")
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "c.tif").write_bytes(b"")

        flat = [p.split("/")[-1] for p in cli.find_images(str(tmp_path))]
        assert flat == ["a.PNG", "b.jpg"]

        deep = [p.split("/")[-1] for p in cli.find_images(str(tmp_path), recursive=True)]
        assert sorted(deep) == ["a.PNG", "b.jpg", "c.tif"]

    def test_single_file_and_missing_path(self, tmp_path):
        path = tmp_path / "x.jpg"
        path.write_bytes(b"")
        assert list(cli.find_images(str(path))) == [str(path)]
        assert list(cli.find_images(str(tmp_path / "missing"))) == []


class TestMain:
    def test_writes_json(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "ExifDataParser", stub_parser_factory)
        src = tmp_path / "photos"
        src.mkdir()
        payload = make_exif({piexif.ImageIFD.Make: b"Canon"})
        Image.new("RGB", (8, 6)).save(src / "a.jpg", "JPEG", exif=payload)
        out = tmp_path / "out"

        assert cli.main([str(src), "-o", str(out)]) == 0

        written = json.loads((out / "a_metadata.json").read_text(encoding="utf-8"))
        assert written["source_file"].endswith("a.jpg")
        assert written["metadata"]["image_data"]["camera_make"] == "Canon"

    def test_failure_sets_exit_code(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "ExifDataParser", stub_parser_factory)
        # extension says JPEG but the bytes are not an image
        (tmp_path / "broken.jpg").write_bytes(b"not a jpeg")

        assert cli.main([str(tmp_path)]) == 1

    def test_limit(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "ExifDataParser", stub_parser_factory)
        for name in ("a.jpg", "b.jpg"):
            Image.new("RGB", (2, 2)).save(tmp_path / name, "JPEG")

        assert cli.main([str(tmp_path), "--limit", "1"]) == 0
        assert (tmp_path / "a_metadata.json").exists()
        assert not (tmp_path / "b_metadata.json").exists()
