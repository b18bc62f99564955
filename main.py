#!/usr/bin/env python3
"""
Utility Bill Extractor - Main Entry Point.

Parses water and electricity bill PDFs into invoice records. It provides
both a command-line interface and programmatic access to the pipeline.

Usage:
    Command Line:
        python main.py --input 913531.pdf
        python main.py --input ./bills/ --output results.json --save

    Python:
        from main import run_extraction
        results = run_extraction("bills/")
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import ConfigurationManager, get_config
from bill_extractor.utils.logger import setup_logger_from_config, get_logger
from bill_extractor.utils.helpers import ensure_directory, get_file_extension
from bill_extractor.utils.exceptions import (
    ExtractionError,
    InputError,
    InputFileNotFoundError,
    UnsupportedFileTypeError,
)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Utility Bill Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process single bill:
        python main.py --input 913531.pdf

    Process directory and store the records:
        python main.py --input ./bills/ --output results.json --save
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Input PDF or directory containing bills"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="JSON file for the results (default: print to stdout)"
    )

    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the records in the database"
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Database file (default: from configuration)"
    )

    parser.add_argument(
        "--no-defaults",
        action="store_true",
        help="Leave missing dates empty instead of filling defaults"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    level = None
    if args.debug:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"
    logger = setup_logger_from_config(level)

    logger.info(f"Utility Bill Extractor {config.get('project.version', '1.0.0')}")
    logger.debug(f"Input: {args.input}")

    return config


def collect_inputs(input_path: str) -> List[Path]:
    """
    Resolve the input argument to a list of bill files.

    Raises:
        InputError: If the path doesn't exist or has an unsupported type.
    """
    from bill_extractor.input_handler import InputHandler

    handler = InputHandler()
    path = Path(input_path)

    if path.is_dir():
        return handler.list_files(path)

    if not path.exists():
        raise InputFileNotFoundError(str(path))

    if get_file_extension(path) not in handler.supported_extensions:
        raise UnsupportedFileTypeError(get_file_extension(path), sorted(handler.supported_extensions))

    return [path]


def run_extraction(
    input_path: str,
    output_path: Optional[str] = None,
    save: bool = False,
    db_path: Optional[str] = None,
    apply_defaults: bool = True
) -> List[Dict[str, Any]]:
    """
    Run the bill extraction pipeline.

    Files that cannot be read are logged and skipped.

    Args:
        input_path: PDF file or directory.
        output_path: JSON file to write, if any.
        save: Store records in the database.
        db_path: Database file. Uses configuration if None.
        apply_defaults: Fill missing dates with defaults.

    Returns:
        List of record dictionaries. Stored records carry their "id".

    Example:
        >>> results = run_extraction("bills/")
        >>> for r in results:
        ...     print(r['customer_number'], r['amount'])
    """
    logger = get_logger(__name__)

    from bill_extractor.input_handler import PDFTextExtractor
    from bill_extractor.extraction import InvoiceExtractor
    from bill_extractor.postprocessor import PostProcessor

    files = collect_inputs(input_path)
    logger.info(f"Processing {len(files)} files...")

    extractor = InvoiceExtractor(PDFTextExtractor())
    post_processor = PostProcessor(apply_defaults=apply_defaults)
    database = None
    if save:
        from bill_extractor.output_handler import DatabaseHandler
        database = DatabaseHandler(db_path)

    results = []
    for file_path in files:
        try:
            record = extractor.extract_file(file_path)
        except ExtractionError as e:
            logger.error(f"Could not process file {file_path.name}: {e}")
            continue

        record = post_processor.process(record)
        validation = post_processor.validate(record)

        entry = record.to_dict()
        entry['missing_fields'] = validation.missing_fields
        entry['warnings'] = validation.warnings

        if database is not None:
            entry['id'] = database.insert(record, file_path=str(file_path))

        results.append(entry)
        logger.info(
            f"  {record.file_name}: customer {record.customer_number or 'N/A'}, "
            f"{record.utility_type.value}, amount {record.amount:.2f}"
        )

    if output_path:
        output_p = Path(output_path)
        ensure_directory(output_p.parent)
        with open(output_p, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=get_config("output.json.indent", 2), ensure_ascii=False)
        logger.info(f"Results written to {output_p}")

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = None
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(
            input_path=args.input,
            output_path=args.output,
            save=args.save,
            db_path=args.db,
            apply_defaults=not args.no_defaults
        )

        if not args.output:
            print(json.dumps(results, indent=2, ensure_ascii=False))

        logger.info(f"Extraction complete. {len(results)} records.")
        return 0

    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args is not None and args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
