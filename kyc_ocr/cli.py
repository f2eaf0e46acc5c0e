"""Command-line interface for Aadhaar card extraction and CSV export.

Provides subcommands for extracting a single card image or URL, parsing
already recognized text, and batch processing a folder to CSV.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path

from kyc_ocr.ocr.document_processor import KycDocumentProcessor, ProcessingResult
from kyc_ocr.utils.config import load_config
from kyc_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.png", "*.jpg", "*.jpeg", "*.tiff", "*.tif", "*.pdf")
_CSV_COLUMNS = [
    "filename",
    "status",
    "id_number",
    "name",
    "date_of_birth",
    "gender",
    "processing_time_s",
    "error",
]


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all supported document files in a directory.

    Args:
        input_dir: Directory to scan for documents.

    Returns:
        Sorted list of document file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _result_payload(result: ProcessingResult, mask: bool = False) -> dict[str, object]:
    """Render a processing result as JSON-ready data.

    Args:
        result: Pipeline outcome.
        mask: Replace the ID number with its masked form.
    """
    payload = result.to_dict()
    if mask and result.success and result.data is not None:
        payload["data"]["id_number"] = result.data.masked_id_number()
    return payload


def _row_for(file_path: Path, result: ProcessingResult, elapsed: float) -> dict:
    row: dict[str, object] = {
        "filename": file_path.name,
        "status": "success" if result.success else "failed",
        "processing_time_s": round(elapsed, 2),
        "error": result.error,
    }
    if result.success and result.data is not None:
        row.update(result.data.to_dict())
    return row


def process_folder(
    input_dir: Path,
    output_csv: Path,
    verbose: bool = False,
    processor: KycDocumentProcessor | None = None,
) -> dict[str, int]:
    """Process all card images in a folder and export results to CSV.

    Args:
        input_dir: Directory containing document files.
        output_csv: Path for the output CSV file.
        verbose: Whether to print per-file progress.
        processor: Pipeline to use; built from config if omitted.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    files = _find_documents(input_dir)
    if not files:
        logger.warning("No documents found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    processor = processor or KycDocumentProcessor(load_config())
    logger.info("Found %d documents to process", len(files))

    rows: list[dict[str, object]] = []
    successful = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        result = processor.process(file_path)
        rows.append(_row_for(file_path, result, time.time() - start_time))
        if result.success:
            successful += 1
        else:
            logger.error("Failed to process %s: %s", file_path.name, result.error)

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {
        "total": len(files),
        "successful": successful,
        "failed": len(files) - successful,
    }
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write extraction rows to a CSV file."""
    if not rows:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout."""
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def _emit(payload: dict[str, object], output: Path | None) -> None:
    output_str = json.dumps(payload, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str)
        print(f"Output written to {output}")
    else:
        print(output_str)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Aadhaar card OCR extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="Path to config YAML"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser(
        "extract", help="Extract details from one image file or URL"
    )
    extract_parser.add_argument("source", help="Image file path or http(s) URL")
    extract_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    extract_parser.add_argument(
        "--mask", action="store_true", help="Mask the middle digits of the ID"
    )

    text_parser = subparsers.add_parser(
        "parse-text", help="Extract details from a file of OCR text"
    )
    text_parser.add_argument("file", type=Path, help="Text file with OCR output")
    text_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    text_parser.add_argument(
        "--mask", action="store_true", help="Mask the middle digits of the ID"
    )

    batch_parser = subparsers.add_parser("batch", help="Process a folder of images")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with documents"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(
            args.input_dir,
            args.output,
            args.verbose,
            processor=KycDocumentProcessor(config),
        )
        return

    if args.command == "parse-text":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        result = KycDocumentProcessor(config).extract_from_text(args.file.read_text())
    else:
        result = KycDocumentProcessor(config).process(args.source)

    _emit(_result_payload(result, mask=args.mask), args.output)
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
