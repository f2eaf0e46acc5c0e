"""Tests for the command-line interface and CSV export."""

import csv
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from kyc_ocr.cli import (
    _find_documents,
    _print_summary,
    _result_payload,
    _write_csv,
    main,
    process_folder,
)
from kyc_ocr.extraction.rule_extractor import ExtractedIdentity
from kyc_ocr.ocr.document_processor import KycDocumentProcessor, ProcessingResult
from kyc_ocr.utils.config import AppConfig


def _success_result() -> ProcessingResult:
    return ProcessingResult(
        success=True,
        data=ExtractedIdentity(
            id_number="123456789012",
            name="RAHUL SHARMA",
            date_of_birth="01/01/1990",
            gender="Male",
        ),
        raw_text="RAHUL SHARMA\n1234 5678 9012",
    )


def _failure_result() -> ProcessingResult:
    return ProcessingResult(
        success=False,
        error="Input bytes are not a decodable image",
        error_type="ImageDecodeError",
    )


class TestFindDocuments:
    """Tests for document discovery."""

    def test_find_png_files(self, tmp_path: Path) -> None:
        (tmp_path / "a.png").touch()
        (tmp_path / "b.png").touch()
        (tmp_path / "c.txt").touch()
        files = _find_documents(tmp_path)
        assert [f.name for f in files] == ["a.png", "b.png"]

    def test_find_mixed_extensions(self, tmp_path: Path) -> None:
        (tmp_path / "a.jpg").touch()
        (tmp_path / "b.pdf").touch()
        (tmp_path / "c.tiff").touch()
        assert len(_find_documents(tmp_path)) == 3

    def test_find_no_documents(self, tmp_path: Path) -> None:
        (tmp_path / "readme.md").touch()
        assert _find_documents(tmp_path) == []


class TestResultPayload:
    """Tests for rendering results as JSON."""

    def test_unmasked(self) -> None:
        payload = _result_payload(_success_result())
        assert payload["data"]["id_number"] == "123456789012"
        assert payload["rawText"] == "RAHUL SHARMA\n1234 5678 9012"

    def test_masked(self) -> None:
        payload = _result_payload(_success_result(), mask=True)
        assert payload["data"]["id_number"] == "1234****9012"

    def test_failure_ignores_mask(self) -> None:
        payload = _result_payload(_failure_result(), mask=True)
        assert payload == {
            "success": False,
            "error": "Input bytes are not a decodable image",
        }


class TestCSVExport:
    """Tests for CSV writing."""

    def test_write_csv_content(self, tmp_path: Path) -> None:
        output = tmp_path / "out.csv"
        rows = [
            {
                "filename": "a.png",
                "status": "success",
                "id_number": "123456789012",
                "name": "RAHUL SHARMA",
                "date_of_birth": "01/01/1990",
                "gender": "Male",
                "processing_time_s": 0.5,
                "error": None,
            }
        ]
        _write_csv(rows, output)

        with open(output) as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames is not None
            assert reader.fieldnames[:2] == ["filename", "status"]
            read_rows = list(reader)
        assert read_rows[0]["id_number"] == "123456789012"
        assert read_rows[0]["error"] == ""

    def test_write_csv_empty_results(self, tmp_path: Path) -> None:
        output = tmp_path / "out.csv"
        _write_csv([], output)
        assert not output.exists()

    def test_write_csv_creates_parent_dirs(self, tmp_path: Path) -> None:
        output = tmp_path / "sub" / "dir" / "out.csv"
        _write_csv([{"filename": "a.png", "status": "failed"}], output)
        assert output.exists()


class TestPrintSummary:
    """Tests for summary output."""

    def test_print_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        _print_summary({"total": 3, "successful": 2, "failed": 1}, Path("out.csv"))
        captured = capsys.readouterr()
        assert "Total:      3" in captured.out
        assert "Successful: 2" in captured.out
        assert "Failed:     1" in captured.out


class TestProcessFolder:
    """Tests for batch folder processing."""

    def test_process_folder_mixed(self, tmp_path: Path) -> None:
        (tmp_path / "good.png").touch()
        (tmp_path / "bad.png").touch()
        processor = MagicMock()
        processor.process.side_effect = [_failure_result(), _success_result()]
        output = tmp_path / "results.csv"

        summary = process_folder(tmp_path, output, processor=processor)

        assert summary == {"total": 2, "successful": 1, "failed": 1}
        with open(output) as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["filename"] == "bad.png"
        assert rows[0]["status"] == "failed"
        assert rows[0]["error"] == "Input bytes are not a decodable image"
        assert rows[1]["status"] == "success"
        assert rows[1]["name"] == "RAHUL SHARMA"

    def test_process_folder_continues_after_crash(
        self, tmp_path: Path, png_bytes: bytes, aadhaar_text: str
    ) -> None:
        (tmp_path / "a.png").write_bytes(png_bytes)
        (tmp_path / "b.png").write_bytes(png_bytes)
        engine = MagicMock()
        engine.extract_text.side_effect = [RuntimeError("ocr crashed"), aadhaar_text]
        processor = KycDocumentProcessor(AppConfig(), ocr_engine=engine)
        output = tmp_path / "results.csv"

        summary = process_folder(tmp_path, output, processor=processor)

        assert summary == {"total": 2, "successful": 1, "failed": 1}
        with open(output) as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["error"] == "ocr crashed"
        assert rows[1]["id_number"] == "123456789012"

    def test_process_folder_empty(self, tmp_path: Path) -> None:
        processor = MagicMock()
        summary = process_folder(tmp_path, tmp_path / "out.csv", processor=processor)
        assert summary == {"total": 0, "successful": 0, "failed": 0}
        processor.process.assert_not_called()

    def test_process_folder_verbose(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (tmp_path / "card.png").touch()
        processor = MagicMock()
        processor.process.return_value = _success_result()

        process_folder(
            tmp_path, tmp_path / "out.csv", verbose=True, processor=processor
        )
        assert "Processing [1/1]" in capsys.readouterr().out


class TestCLIMain:
    """Tests for the CLI argument parser and main entry point."""

    def test_no_command_shows_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0

    def test_batch_nonexistent_directory(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["batch", "/nonexistent/path"])
        assert exc_info.value.code == 1
        assert "not a directory" in capsys.readouterr().err

    def test_parse_text_nonexistent_file(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["parse-text", "/nonexistent/ocr.txt"])
        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    @patch("kyc_ocr.cli.process_folder")
    @patch("kyc_ocr.cli.KycDocumentProcessor")
    def test_batch_command(
        self, mock_cls: MagicMock, mock_pf: MagicMock, tmp_path: Path
    ) -> None:
        mock_pf.return_value = {"total": 1, "successful": 1, "failed": 0}
        output = tmp_path / "out.csv"

        main(["batch", str(tmp_path), "-o", str(output), "-v"])

        mock_pf.assert_called_once_with(
            tmp_path, output, True, processor=mock_cls.return_value
        )

    @patch("kyc_ocr.cli.KycDocumentProcessor")
    def test_extract_command(
        self, mock_cls: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        mock_cls.return_value.process.return_value = _success_result()

        main(["extract", "https://cdn.example.com/card.png"])

        mock_cls.return_value.process.assert_called_once_with(
            "https://cdn.example.com/card.png"
        )
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is True
        assert payload["data"]["name"] == "RAHUL SHARMA"

    @patch("kyc_ocr.cli.KycDocumentProcessor")
    def test_extract_failure_exits_1(
        self, mock_cls: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        mock_cls.return_value.process.return_value = _failure_result()

        with pytest.raises(SystemExit) as exc_info:
            main(["extract", "card.png"])

        assert exc_info.value.code == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is False

    @patch("kyc_ocr.cli.KycDocumentProcessor")
    def test_extract_to_output_file_masked(
        self, mock_cls: MagicMock, tmp_path: Path
    ) -> None:
        mock_cls.return_value.process.return_value = _success_result()
        output = tmp_path / "result.json"

        main(["extract", "card.png", "-o", str(output), "--mask"])

        data = json.loads(output.read_text())
        assert data["data"]["id_number"] == "1234****9012"

    def test_parse_text_end_to_end(
        self,
        tmp_path: Path,
        aadhaar_text: str,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        text_file = tmp_path / "ocr.txt"
        text_file.write_text(aadhaar_text)

        main(["parse-text", str(text_file)])

        payload = json.loads(capsys.readouterr().out)
        assert payload["data"] == {
            "id_number": "123456789012",
            "name": "RAHUL SHARMA",
            "date_of_birth": "01/01/1990",
            "gender": "Male",
        }
