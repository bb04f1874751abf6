#!/usr/bin/env python
"""
Excel-to-DTO Generator – CLI entry point.

Usage:
    python -m excel_to_dto.main <excel_file> [--config config.yaml] [--sheet Definition] [--output-dir output]
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_to_dto.exceptions import DtoGeneratorError
from excel_to_dto.generator import generate_dtos, load_config


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate Python DTO classes from an Excel definition sheet"
    )
    parser.add_argument("excel_file", help="Path to the definition workbook (.xlsx)")
    parser.add_argument(
        "--config", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)",
    )
    parser.add_argument(
        "--sheet", default=None,
        help="Definition sheet name (overrides config; default: active sheet)",
    )
    parser.add_argument(
        "--output-dir", default=None,
        help="Output directory (default: per-platform default path)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args(argv)

    if not os.path.exists(args.excel_file):
        print(f"Error: File '{args.excel_file}' not found.")
        sys.exit(1)

    logger = logging.getLogger(__name__)
    try:
        config = load_config(args.config)
        setup_logging(args.log_level or config.get("log_level", "INFO"))
        written = generate_dtos(
            args.excel_file,
            sheet_name=args.sheet,
            output_dir=args.output_dir,
            config=config,
        )
    except DtoGeneratorError as e:
        logger.error(str(e))
        sys.exit(1)

    for path in written:
        print(path)


if __name__ == "__main__":
    main()
