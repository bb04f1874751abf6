"""
Orchestrates the Excel -> DTO pipeline.

Steps:
  1. Load the configuration (item names, sheet, depth limit, output paths).
  2. Open the definition sheet.
  3. Collect document metadata and rebuild the class hierarchy.
  4. Render one Python module per top-level class.
  5. Write the modules below ``<output>/<package path>/``.
"""

import copy
import logging
import os
from typing import List, Optional

import yaml

from .code_generator import create_resources
from .collector import collect_definitions, collect_meta
from .exceptions import ConfigurationError
from .items import ItemNameResolver
from .output_path import DEFAULT_OUTPUT, DefinitionPath
from .reconstructor import DEFAULT_MAX_DEPTH
from .sheet_reader import load_definition_sheet

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "sheet_name": None,
    "item_names": {},
    "max_depth": DEFAULT_MAX_DEPTH,
    "default_output": DEFAULT_OUTPUT,
    "log_level": "INFO",
}


def load_config(config_path):
    """Load configuration from a YAML file on top of the defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            try:
                user_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"{config_path} must contain a mapping, got {type(user_config).__name__}"
            )
        config.update(user_config)
    return config


def _max_depth(config: dict) -> int:
    """``max_depth`` from *config* as a positive integer; absent or null means the default."""
    value = config.get("max_depth")
    if value is None:
        return DEFAULT_MAX_DEPTH
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"max_depth must be a positive integer, got {value!r}")
    return value


def _write_resource(directory: str, file_name: str, text: str) -> str:
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, file_name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def _ensure_packages(output_path: str, package_name: str):
    """Create ``__init__.py`` in every package directory below *output_path*."""
    directory = output_path
    for part in [p for p in (package_name or "").split(".") if p]:
        directory = os.path.join(directory, part)
        os.makedirs(directory, exist_ok=True)
        init_path = os.path.join(directory, "__init__.py")
        if not os.path.exists(init_path):
            open(init_path, "w").close()


def generate_dtos(excel_path: str, config_path: Optional[str] = None,
                  sheet_name: Optional[str] = None,
                  output_dir: Optional[str] = None,
                  config: Optional[dict] = None) -> List[str]:
    """
    Generate Python DTO modules from a definition workbook.

    Args:
        excel_path: Path to the definition workbook (.xlsx)
        config_path: Optional path to a config YAML file
        sheet_name: Sheet to read (overrides config; default: active sheet)
        output_dir: Output directory (default: per-platform default path)
        config: Already-loaded configuration (skips *config_path*)

    Returns:
        Paths of the generated modules
    """
    config = config if config is not None else load_config(config_path)
    definition_path = DefinitionPath(excel_path, output_dir or "",
                                     default_output=config.get("default_output"))
    resolver = ItemNameResolver.from_config(config.get("item_names"))
    max_depth = _max_depth(config)

    logger.info("Step 1: Reading definition sheet...")
    wb, ws = load_definition_sheet(definition_path.file_path,
                                   sheet_name or config.get("sheet_name"))
    try:
        meta = collect_meta(ws, resolver)
        group = collect_definitions(ws, resolver, max_depth=max_depth)
    finally:
        wb.close()

    logger.info("Step 2: Rendering DTO modules...")
    resources = create_resources(meta, group)

    logger.info("Step 3: Writing DTO modules...")
    output_path = definition_path.output_path
    written = []
    for resource in resources:
        _ensure_packages(output_path, resource.package_name)
        path = _write_resource(definition_path.package_directory(resource.package_name),
                               resource.file_name, resource.resource)
        logger.info(f"  Wrote {path}")
        written.append(path)

    logger.info(f"Generated {len(written)} modules")
    return written
