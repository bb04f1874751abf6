"""End-to-end tests for the Excel -> DTO generator and its CLI."""

import os
import sys

import pytest
import yaml
from openpyxl import Workbook

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

from create_sample_definition import create_sample_definition, write_matrix
from excel_to_dto import main as cli
from excel_to_dto.exceptions import (
    ConfigurationError,
    EmptyHierarchyError,
    HierarchyTooDeepError,
    MalformedRecordError,
)
from excel_to_dto.generator import DEFAULT_CONFIG, generate_dtos, load_config


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_wb(tmp_path):
    return create_sample_definition(str(tmp_path / "definition.xlsx"))


@pytest.fixture
def out_dir(tmp_path):
    return str(tmp_path / "out")


def _write_config(path, data):
    with open(path, "w") as f:
        yaml.safe_dump(data, f)
    return str(path)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_load_config_defaults():
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_missing_file_uses_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.yaml")) == DEFAULT_CONFIG


def test_load_config_overrides(tmp_path):
    path = _write_config(tmp_path / "config.yaml", {"max_depth": 4, "sheet_name": "Defs"})
    config = load_config(path)
    assert config["max_depth"] == 4
    assert config["sheet_name"] == "Defs"
    assert config["log_level"] == "INFO"


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_load_config_rejects_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("key: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_shipped_config_matches_defaults():
    repo_config = os.path.join(os.path.dirname(__file__), "..", "config.yaml")
    config = load_config(repo_config)
    assert config["sheet_name"] == "Definition"
    assert config["max_depth"] == DEFAULT_CONFIG["max_depth"]
    assert config["default_output"] == DEFAULT_CONFIG["default_output"]


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def test_generate_writes_one_module_per_class(sample_wb, out_dir):
    written = generate_dtos(sample_wb, output_dir=out_dir)
    package_dir = os.path.join(out_dir, "example", "dto")
    assert written == [
        os.path.join(package_dir, "user.py"),
        os.path.join(package_dir, "group.py"),
    ]
    assert os.path.exists(os.path.join(out_dir, "example", "__init__.py"))
    assert os.path.exists(os.path.join(package_dir, "__init__.py"))


def test_generated_module_imports(sample_wb, out_dir):
    written = generate_dtos(sample_wb, output_dir=out_dir)
    with open(written[0], encoding="utf-8") as f:
        source = f.read()
    assert "Creator: Jane Doe" in source
    assert "legacy" not in source

    namespace = {}
    exec(compile(source, written[0], "exec"), namespace)
    address = namespace["Address"](city="Osaka", zip_code="530")
    user = namespace["User"](address=address)
    assert user.user_id == 0
    assert user.name == ""
    assert user.schema_version == 1
    assert user.address.city == "Osaka"


def test_generate_with_custom_item_names(tmp_path, out_dir):
    path = str(tmp_path / "custom.xlsx")
    wb = Workbook()
    ws = wb.active
    ws.title = "Defs"
    write_matrix(
        ws,
        [("", 0, "Item", "", "", "", "an item"), ("", 1, "sku", "str", "", "", "stock unit")],
        header_row=3, first_column=1,
        headers=["Removed", "Level", "Name", "Type", "Default", "Const", "Notes"],
    )
    wb.save(path)
    wb.close()

    config = load_config(None)
    config["item_names"] = {
        "logical_delete": "Removed",
        "layer": "Level",
        "variable_name": "Name",
        "data_type": "Type",
        "initial_value": "Default",
        "invariant": "Const",
        "description": "Notes",
    }
    written = generate_dtos(path, sheet_name="Defs", output_dir=out_dir, config=config)
    assert written == [os.path.join(out_dir, "item.py")]
    with open(written[0], encoding="utf-8") as f:
        assert "    sku: str  # stock unit" in f.read()


def test_generate_empty_definition_fails(tmp_path, out_dir):
    path = create_sample_definition(str(tmp_path / "empty.xlsx"), rows=[])
    with pytest.raises(EmptyHierarchyError):
        generate_dtos(path, output_dir=out_dir)
    assert not os.path.exists(out_dir)


def test_generate_malformed_layer_fails(tmp_path, out_dir):
    rows = [("", 0, "User", "", "", "", ""), ("", "one", "id", "int", "", "", "")]
    path = create_sample_definition(str(tmp_path / "bad.xlsx"), rows=rows)
    with pytest.raises(MalformedRecordError):
        generate_dtos(path, output_dir=out_dir)


def test_generate_respects_max_depth(sample_wb, out_dir):
    config = load_config(None)
    config["max_depth"] = 1
    with pytest.raises(HierarchyTooDeepError):
        generate_dtos(sample_wb, output_dir=out_dir, config=config)


@pytest.mark.parametrize("max_depth", ["deep", 0, -3, 2.5, True])
def test_generate_rejects_invalid_max_depth(tmp_path, out_dir, max_depth):
    config = load_config(None)
    config["max_depth"] = max_depth
    with pytest.raises(ConfigurationError, match="max_depth"):
        generate_dtos(str(tmp_path / "nope.xlsx"), output_dir=out_dir, config=config)


def test_generate_accepts_numeric_string_max_depth(sample_wb, out_dir):
    config = load_config(None)
    config["max_depth"] = "8"
    assert len(generate_dtos(sample_wb, output_dir=out_dir, config=config)) == 2


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def test_cli_generates_modules(sample_wb, out_dir, capsys):
    cli.main([sample_wb, "--output-dir", out_dir, "--config", "missing.yaml"])
    printed = capsys.readouterr().out.split()
    assert printed == [
        os.path.join(out_dir, "example", "dto", "user.py"),
        os.path.join(out_dir, "example", "dto", "group.py"),
    ]


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([str(tmp_path / "missing.xlsx")])
    assert exc_info.value.code == 1
    assert "not found" in capsys.readouterr().out


def test_cli_reports_generator_errors(tmp_path, out_dir):
    path = create_sample_definition(str(tmp_path / "empty.xlsx"), rows=[])
    with pytest.raises(SystemExit) as exc_info:
        cli.main([path, "--output-dir", out_dir, "--config", "missing.yaml"])
    assert exc_info.value.code == 1


def test_cli_unknown_sheet(sample_wb, out_dir):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([sample_wb, "--sheet", "Nope", "--output-dir", out_dir,
                  "--config", "missing.yaml"])
    assert exc_info.value.code == 1


def test_cli_reports_invalid_config(sample_wb, out_dir, tmp_path):
    config_path = _write_config(tmp_path / "config.yaml", {"max_depth": "deep"})
    with pytest.raises(SystemExit) as exc_info:
        cli.main([sample_wb, "--output-dir", out_dir, "--config", config_path])
    assert exc_info.value.code == 1
    assert not os.path.exists(out_dir)
