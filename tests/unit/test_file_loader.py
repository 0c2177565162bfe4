from pathlib import Path

import pytest

from passport_extractor.processor.file_loader import FileLoader, guess_media_type


class TestGuessMediaType:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("photo.jpg", "image/jpeg"),
            ("photo.JPEG", "image/jpeg"),
            ("scan.png", "image/png"),
            ("scan.webp", "image/webp"),
            ("batch.pdf", "application/pdf"),
            ("unknown", "application/octet-stream"),
        ],
    )
    def test_guesses_from_extension(self, name: str, expected: str) -> None:
        assert guess_media_type(Path(name)) == expected


class TestFileLoader:
    def test_reads_bytes_and_name(self, tmp_path: Path) -> None:
        path = tmp_path / "passport.pdf"
        path.write_bytes(b"%PDF-1.4 test")
        upload = FileLoader().load(path)
        assert upload.data == b"%PDF-1.4 test"
        assert isinstance(upload.data, bytearray)
        assert upload.media_type == "application/pdf"
        assert upload.filename == "passport.pdf"
        assert upload.size_bytes == 13

    def test_explicit_media_type_wins(self, tmp_path: Path) -> None:
        path = tmp_path / "upload.bin"
        path.write_bytes(b"x")
        assert FileLoader().load(path, "image/png").media_type == "image/png"

    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="File not found"):
            FileLoader().load(tmp_path / "missing.jpg")
