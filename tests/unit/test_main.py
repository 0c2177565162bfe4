import json
from pathlib import Path

import pytest

from passport_extractor.main import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_OK,
    main,
)


@pytest.fixture()
def example_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXTRACTION_PROVIDER", "example")
    monkeypatch.setenv("PDF_RENDER_DPI", "72")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


class TestImageCommand:
    def test_single_image_prints_record(
        self,
        example_env: None,
        tmp_path: Path,
        jpeg_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "passport.jpg"
        path.write_bytes(jpeg_bytes)
        assert main(["image", str(path)]) == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        assert payload["data"]["passportNumber"] == "X12345678"
        assert payload["validation"]["isValid"] is True

    def test_many_images_print_batch(
        self,
        example_env: None,
        tmp_path: Path,
        jpeg_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        paths = []
        for name in ("a.jpg", "b.jpg"):
            path = tmp_path / name
            path.write_bytes(jpeg_bytes)
            paths.append(str(path))
        assert main(["image", *paths]) == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        assert payload["successCount"] == 2
        assert payload["errors"] == []

    def test_csv_output(
        self,
        example_env: None,
        tmp_path: Path,
        jpeg_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "passport.jpg"
        path.write_bytes(jpeg_bytes)
        assert main(["image", str(path), "--format", "csv"]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith('"Page/Index","Full Name"')
        assert "X12345678" in out


class TestPdfCommand:
    def test_text_mode(
        self,
        example_env: None,
        tmp_path: Path,
        passport_pdf_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "passports.pdf"
        path.write_bytes(passport_pdf_bytes)
        assert main(["pdf", str(path), "--mode", "text"]) == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        assert len(payload["results"]) == 2


class TestExitCodes:
    def test_missing_file_is_input_error(
        self,
        example_env: None,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["image", str(tmp_path / "missing.jpg")]) == EXIT_INPUT_ERROR
        err = capsys.readouterr().err
        assert "Invalid input" in err
        assert "File not found" in err

    def test_unsupported_type_is_input_error(
        self,
        example_env: None,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert main(["image", str(path)]) == EXIT_INPUT_ERROR
        assert "Unsupported file type" in capsys.readouterr().err

    def test_unknown_provider_is_configuration_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("EXTRACTION_PROVIDER", "nope")
        monkeypatch.setenv("EXTRACTION_API_KEY", "k")
        assert main(["quality", str(tmp_path / "a.jpg")]) == EXIT_CONFIGURATION_ERROR
        assert "Configuration error" in capsys.readouterr().err

    def test_zero_concurrency_is_configuration_error(
        self,
        example_env: None,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        jpeg_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("IMAGE_BATCH_CONCURRENCY", "0")
        first, second = tmp_path / "a.jpg", tmp_path / "b.jpg"
        first.write_bytes(jpeg_bytes)
        second.write_bytes(jpeg_bytes)
        assert main(["image", str(first), str(second)]) == EXIT_CONFIGURATION_ERROR
        assert "Configuration error" in capsys.readouterr().err
