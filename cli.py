#!/usr/bin/env python3
"""
Scene Validator - Standalone Command Line Interface
===================================================

Command-line tool for checking scene object files without MCP/LLM
integration. Useful for development, testing, and validating files
produced by an upstream author before they reach the renderer.

The input file holds either one scene object or an array of them (a
composition, in render order).

Usage Examples:
    python cli.py scene.json                     # Validate, print normalized JSON
    python cli.py scene.json normalized.json     # Save normalized output to file
    python cli.py --validate scene.json          # Validation only
    python cli.py --workers 4 scene.json         # Validate objects in parallel
    python cli.py --schema schema.json           # Write the JSON Schema and exit
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Any, List, Optional

from scene_models import save_schema
from validation import validate_scene_data, validate_composition_data, summarize_objects

# Exit codes
EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_VALIDATION_ERROR = 2


# ============================================================================
# Setup
# ============================================================================

def setup_cross_platform_environment():
    """Ensure UTF-8 console output on Windows."""
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')

def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for CLI usage.

    Logs go to stderr so stdout carries only the normalized JSON.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - SCENE-CLI - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Scene Validator CLI starting (verbose={'on' if verbose else 'off'})")
    return logger


# ============================================================================
# File I/O Operations
# ============================================================================

def load_json_file(file_path: Path, logger: logging.Logger) -> Optional[Any]:
    """
    Load and parse a JSON file, printing line/column context on errors.

    Returns None if the file could not be read or parsed.
    """
    logger.debug(f"Loading JSON file: {file_path}")

    if not file_path.exists():
        logger.error(f"Input file not found: {file_path}")
        print(f"Error: Input file '{file_path}' does not exist.", file=sys.stderr)
        return None

    if not file_path.is_file():
        logger.error(f"Path is not a file: {file_path}")
        print(f"Error: '{file_path}' is not a regular file.", file=sys.stderr)
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            text = f.read()
        return json.loads(text)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing failed: {e}")
        print(f"Error: Invalid JSON in '{file_path}':", file=sys.stderr)
        print(f"  Line {e.lineno}, Column {e.colno}: {e.msg}", file=sys.stderr)

        lines = text.splitlines()
        if 0 < e.lineno <= len(lines):
            print(f"  >>> {lines[e.lineno - 1].rstrip()}", file=sys.stderr)
            if e.colno > 0:
                print(" " * (e.colno - 1 + 6) + "^", file=sys.stderr)
        return None

    except UnicodeDecodeError as e:
        logger.error(f"Unicode decoding failed: {e}")
        print(f"Error: Cannot read '{file_path}' - file encoding issue.", file=sys.stderr)
        print("  Try saving the file as UTF-8 encoding.", file=sys.stderr)
        return None

    except OSError as e:
        logger.error(f"Unexpected error loading file: {e}")
        print(f"Error: Cannot read '{file_path}': {e}", file=sys.stderr)
        return None

def save_output_file(content: str, file_path: Path, logger: logging.Logger) -> bool:
    """Write normalized output, creating parent directories if needed."""
    logger.debug(f"Saving output to: {file_path}")

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)

        logger.info(f"Output saved to: {file_path}")
        return True

    except PermissionError:
        logger.error(f"Permission denied writing to: {file_path}")
        print(f"Error: Permission denied writing to '{file_path}'.", file=sys.stderr)
        return False

    except OSError as e:
        logger.error(f"OS error writing file: {e}")
        print(f"Error: Cannot write to '{file_path}': {e}", file=sys.stderr)
        return False


# ============================================================================
# Validation Pipeline
# ============================================================================

def process_scene_validation(data: Any, logger: logging.Logger,
                             max_workers: Optional[int] = None) -> Optional[str]:
    """
    Validate a single object or a composition and return normalized JSON.

    Returns None (after printing the error to stderr) if validation fails.
    """
    if isinstance(data, list):
        logger.debug(f"Validating composition of {len(data)} objects")
        result = validate_composition_data(data, max_workers=max_workers)
        payload = result.get("composition")
    else:
        logger.debug("Validating single scene object")
        result = validate_scene_data(data)
        payload = result.get("object")

    if result["isError"]:
        print("Validation Error:", file=sys.stderr)
        print(f"  Type: {result.get('errorType', 'unknown')}", file=sys.stderr)
        if result.get("field"):
            print(f"  Field: {result['field']}", file=sys.stderr)
        print(f"  Problem: {result['message']}", file=sys.stderr)
        print(f"  Solution: {result['suggestion']}", file=sys.stderr)
        return None

    if isinstance(data, list):
        objects = payload["objects"]
        counts = ", ".join(f"{count} {object_type}" for object_type, count in summarize_objects(objects).items())
        print(f"✓ Composition valid: {len(objects)} objects ({counts or 'empty'})", file=sys.stderr)
    else:
        print(f"✓ Scene object valid: {payload['type']}", file=sys.stderr)

    return json.dumps(payload, indent=2)


# ============================================================================
# Command Line Interface
# ============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate scene objects and compositions against the scene schema",
        epilog="""
Examples:
  %(prog)s scene.json                    # Print normalized JSON
  %(prog)s scene.json output.json        # Save normalized JSON to file
  %(prog)s --validate scene.json         # Check input validity only
  %(prog)s --schema schema.json          # Export the JSON Schema
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'input_file',
        type=Path,
        nargs='?',
        help='JSON file containing a scene object or an array of them'
    )

    parser.add_argument(
        'output_file',
        type=Path,
        nargs='?',
        help='Output file for the normalized JSON (default: print to console)'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='Validate input file without printing normalized output'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Number of threads used to validate a composition (default: automatic)'
    )

    parser.add_argument(
        '--schema',
        type=Path,
        metavar='FILE',
        help='Write the JSON Schema for every object type to FILE and exit'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging for debugging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version='Scene Validator 0.1.0'
    )

    return parser

def main(argv: Optional[List[str]] = None):
    """
    Main CLI entry point.

    Exit codes:
    - 0: Success
    - 1: Input/output errors
    - 2: Validation errors
    """
    setup_cross_platform_environment()

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(args.verbose)

    if args.schema:
        save_schema(str(args.schema))
        print(f"✓ Schema saved to {args.schema}", file=sys.stderr)
        sys.exit(EXIT_OK)

    if args.input_file is None:
        parser.error("input_file is required unless --schema is given")

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    data = load_json_file(args.input_file, logger)
    if data is None:
        sys.exit(EXIT_IO_ERROR)

    output = process_scene_validation(data, logger, max_workers=args.workers)
    if output is None:
        sys.exit(EXIT_VALIDATION_ERROR)

    if args.validate:
        sys.exit(EXIT_OK)

    if args.output_file:
        if not save_output_file(output, args.output_file, logger):
            sys.exit(EXIT_IO_ERROR)
        print(f"✓ Normalized output saved: {args.output_file}", file=sys.stderr)
        sys.exit(EXIT_OK)

    print(output)
    sys.exit(EXIT_OK)


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)
