"""Command-line interface for the SAMI Caption Converter.

WHY: Users need a simple way to convert caption files from the terminal.
The CLI wires together the full pipeline: file validation, encoding
normalisation and header check, parsing into caption records, optional
timing validation, formatter output and file saving, behind one command.

HOW: Uses argparse to accept an input file, the target format, the
subtitle language (for encoding resolution) and an output directory.
SAMI input (.smi/.sami) is parsed into records; caption JSON input
(.json) is loaded and schema-validated. Status messages go to stderr;
output files are saved next to the source (or to --output-dir).

RULES:
- Positional argument: input caption file path
- --to defaults to the opposite of the input (SAMI → caption_json, JSON → sami)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (episode-2.smi)
- --check reports timing issues but never blocks the conversion
- Status output goes to stderr (not stdout)
- Any failure prints "Error: ..." to stderr and exits with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import jsonschema

from sami_captions.config import DEFAULT_LANGUAGE, configure_logging
from sami_captions.core.loader import load_sami_records
from sami_captions.core.records import CaptionRecord, load_caption_json, validate_records
from sami_captions.formatters import FORMATTERS
from sami_captions.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)

SAMI_EXTENSIONS = {".smi", ".sami"}
JSON_EXTENSIONS = {".json"}


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the converter multiple times on the same file.
    Overwriting previous output would lose work.

    HOW: Check if {stem}{suffix} exists. If so, insert an increasing
    counter before the file extension until a free name is found
    (episode.smi → episode-2.smi → episode-3.smi).

    Args:
        stem: Source filename stem (without extension).
        suffix: Formatter's suffix (e.g. ".smi").
        output_dir: Directory to save the output file.

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Save a single formatter output to disk as UTF-8 and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _load_records(
    input_path: Path,
    language: Optional[str],
    flush_trailing: bool,
) -> List[CaptionRecord]:
    """Load caption records from a SAMI or caption JSON file.

    Raises:
        ValueError: If a SAMI file fails header verification.
        OSError, json.JSONDecodeError, jsonschema.ValidationError:
            Propagated from reading and validation.
    """
    ext = input_path.suffix.lower()
    if ext in SAMI_EXTENSIONS:
        error, records = load_sami_records(input_path, language, flush_trailing=flush_trailing)
        if error is not None:
            raise ValueError("{}: {}".format(error.value, input_path.name))
        return records
    return load_caption_json(input_path.read_text(encoding="utf-8-sig"))


def _run(args: argparse.Namespace) -> int:
    """Execute the conversion and return the process exit status."""
    input_path = Path(args.input_file).resolve()

    if not input_path.is_file():
        print("Error: File not found: {}".format(input_path), file=sys.stderr)
        return 1

    ext = input_path.suffix.lower()
    if ext not in SAMI_EXTENSIONS | JSON_EXTENSIONS:
        supported = ", ".join(sorted(SAMI_EXTENSIONS | JSON_EXTENSIONS))
        print(
            "Error: Unsupported file type '{}'. Supported formats: {}".format(ext, supported),
            file=sys.stderr,
        )
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        return 1

    target = args.to or ("caption_json" if ext in SAMI_EXTENSIONS else "sami")

    try:
        _status("Reading {}...".format(input_path.name))
        records = _load_records(input_path, args.language, args.flush_trailing)
        _status("  {} caption record(s)".format(len(records)))

        if args.check:
            issues = validate_records(records)
            if issues:
                _status("Timing issues:")
                for issue in issues:
                    _status("  {}".format(issue))
            else:
                _status("  Timing check passed")

        formatter = FORMATTERS[target]()
        _status("Running {} formatter...".format(formatter.name))
        saved: List[Path] = []
        for output in formatter.format(records):
            saved.append(_save_output(output, input_path.stem, output_dir))
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        logger.debug("Conversion failed", exc_info=True)
        message = e.message if isinstance(e, jsonschema.ValidationError) else str(e)
        print("Error: {}".format(message), file=sys.stderr)
        return 1

    _status("Done! Saved {} file(s) to {}".format(len(saved), output_dir))
    for path in saved:
        _status("  {}".format(path.name))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without running
    a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="sami_captions",
        description="Convert captions between SAMI (.smi) and caption JSON.",
    )

    parser.add_argument(
        "input_file",
        help="Path to a .smi/.sami or caption .json file.",
    )

    parser.add_argument(
        "--to",
        choices=sorted(FORMATTERS.keys()),
        default=None,
        help="Output format (default: the opposite of the input format).",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="ISO 639-1 code of the subtitle language, used to resolve "
             "legacy encodings (default: %(default)s).",
    )

    parser.add_argument(
        "--flush-trailing",
        action="store_true",
        help="Keep a final SAMI cue that is not closed by an &nbsp; sync.",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Report missing, negative or decreasing timestamps.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging (encoding detection, dropped cues).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    argv=None means use sys.argv; explicit argv is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    sys.exit(_run(args))


if __name__ == "__main__":
    main()
