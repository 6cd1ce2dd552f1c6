"""
Tests for PipelineGenerator: artifacts on disk, incremental runs and
failure handling.
"""

from __future__ import annotations

import ast
import copy
import logging

import pytest

from openapi_to_models.pipeline import (
    GeneratorConfig,
    LintConfig,
    PipelineGenerator,
    SchemaGenerationError,
    SpecStructureError,
    StyleRegistry,
    UnknownStyleError,
)
from openapi_to_models.pipeline.backends import DataclassBackend
from openapi_to_models.pipeline.cache import CACHE_FILE_NAME
from openapi_to_models.pipeline.lint import LintRuleId, LintSeverity
from openapi_to_models.pipeline.merger import FILE_MARKER, REGION_START_MARKER, REGION_STOP_MARKER

REF = "#/components/schemas/"

STORE_DOC = {
    "openapi": "3.0.0",
    "components": {
        "schemas": {
            "Order": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "integer"},
                    "status": {"$ref": REF + "OrderStatus"},
                    "customer": {"$ref": REF + "Customer", "nullable": True},
                },
            },
            "Customer": {
                "type": "object",
                "description": "Someone who buys things.",
                "properties": {"name": {"type": "string"}},
            },
            "OrderStatus": {"type": "string", "enum": ["placed", "delivered"]},
        }
    },
}


def make_generator(tmp_path, document=None, registry=None, **options):
    config = GeneratorConfig(output_dir=str(tmp_path / "models"), project_dir=str(tmp_path), **options)
    return PipelineGenerator(copy.deepcopy(document or STORE_DOC), config, registry)


def module_text(tmp_path, name):
    return (tmp_path / "models" / f"{name}.py").read_text()


class FailingBackend(DataclassBackend):
    """Dataclass backend that cannot render the Customer class."""

    def render_class(self, class_name, *args, **kwargs):
        if class_name == "Customer":
            raise RuntimeError("boom")
        return super().render_class(class_name, *args, **kwargs)


def failing_registry():
    registry = StyleRegistry.default()
    registry.register("failing", FailingBackend)
    return registry


class TestPipelineGenerator:
    """Tests for full generation runs."""

    def test_generates_one_module_per_schema(self, tmp_path):
        """Test the artifacts of a first run."""
        result = make_generator(tmp_path).generate()

        assert result.success
        assert result.schemas_processed == 3
        assert result.enums_processed == 1
        assert result.files_created == 3
        assert sorted(p.name for p in result.generated_files) == ["customer.py", "order.py", "order_status.py"]

        order = module_text(tmp_path, "order")
        assert order.startswith(FILE_MARKER + "\n\nfrom __future__ import annotations\n\n")
        assert "from .customer import Customer" in order
        assert "from .order_status import OrderStatus" in order
        assert "    status: OrderStatus\n" in order
        assert "    customer: Customer | None = None\n" in order
        for name in ("order", "customer", "order_status"):
            ast.parse(module_text(tmp_path, name))

    def test_enums_are_generated_first(self, tmp_path):
        result = make_generator(tmp_path).generate()
        assert [r.schema_name for r in result.schema_results] == ["OrderStatus", "Order", "Customer"]

    def test_second_run_is_byte_identical(self, tmp_path):
        """Test that regenerating an unchanged document changes nothing."""
        make_generator(tmp_path).generate()
        before = {p.name: p.read_bytes() for p in (tmp_path / "models").iterdir()}

        result = make_generator(tmp_path).generate()

        after = {p.name: p.read_bytes() for p in (tmp_path / "models").iterdir()}
        assert after == before
        assert result.files_unchanged == 3
        assert result.files_created == result.files_updated == 0

    def test_changed_only_skips_unchanged_schemas(self, tmp_path):
        """Test that an unchanged schema is not rewritten in changed-only mode."""
        make_generator(tmp_path).generate()
        order_path = tmp_path / "models" / "order.py"
        mtime = order_path.stat().st_mtime_ns

        result = make_generator(tmp_path, changed_only=True).generate()

        assert result.schemas_processed == 0
        assert result.schema_results == []
        assert order_path.stat().st_mtime_ns == mtime

    def test_changed_only_regenerates_changed_schema(self, tmp_path):
        make_generator(tmp_path).generate()
        document = copy.deepcopy(STORE_DOC)
        document["components"]["schemas"]["Customer"]["properties"]["email"] = {"type": "string"}

        result = make_generator(tmp_path, document, changed_only=True).generate()

        assert [r.schema_name for r in result.schema_results] == ["Customer"]
        assert result.files_updated == 1
        assert "    email: str\n" in module_text(tmp_path, "customer")

    def test_changed_only_deletes_removed_schemas(self, tmp_path):
        """Test that artifacts of schemas removed from the document are deleted."""
        make_generator(tmp_path).generate()
        (tmp_path / "models" / "notes.py").write_text("# not generated\n")
        document = copy.deepcopy(STORE_DOC)
        del document["components"]["schemas"]["Customer"]
        document["components"]["schemas"]["Order"]["properties"].pop("customer")

        result = make_generator(tmp_path, document, changed_only=True).generate()

        assert result.files_deleted == [tmp_path / "models" / "customer.py"]
        assert not (tmp_path / "models" / "customer.py").exists()
        assert (tmp_path / "models" / "notes.py").exists()
        assert "Customer" not in (tmp_path / CACHE_FILE_NAME).read_text()

    def test_changed_only_keeps_unmarked_module_of_removed_schema(self, tmp_path):
        """Test that a module without the generator marker is never deleted."""
        make_generator(tmp_path).generate()
        (tmp_path / "models" / "customer.py").write_text("# written by hand\n")
        document = copy.deepcopy(STORE_DOC)
        del document["components"]["schemas"]["Customer"]
        document["components"]["schemas"]["Order"]["properties"].pop("customer")

        result = make_generator(tmp_path, document, changed_only=True).generate()

        assert result.files_deleted == []
        assert (tmp_path / "models" / "customer.py").read_text() == "# written by hand\n"
        assert "Customer" not in (tmp_path / CACHE_FILE_NAME).read_text()

    def test_full_run_keeps_removed_schemas_for_changed_only_run(self, tmp_path):
        """Test that a full run in between does not lose track of removed schemas."""
        make_generator(tmp_path).generate()
        document = copy.deepcopy(STORE_DOC)
        del document["components"]["schemas"]["Customer"]
        document["components"]["schemas"]["Order"]["properties"].pop("customer")

        full = make_generator(tmp_path, document).generate()
        assert full.files_deleted == []
        assert (tmp_path / "models" / "customer.py").exists()
        assert "Customer" in (tmp_path / CACHE_FILE_NAME).read_text()

        result = make_generator(tmp_path, document, changed_only=True).generate()

        assert result.files_deleted == [tmp_path / "models" / "customer.py"]
        assert not (tmp_path / "models" / "customer.py").exists()
        assert "Customer" not in (tmp_path / CACHE_FILE_NAME).read_text()

    def test_user_code_survives_regeneration(self, tmp_path):
        """Test that code outside the generated region is preserved."""
        make_generator(tmp_path).generate()
        path = tmp_path / "models" / "customer.py"
        content = path.read_text()
        content = content.replace(REGION_START_MARKER, "import json\n\n" + REGION_START_MARKER)
        content += "\n\ndef describe(customer):\n    return json.dumps(customer.to_json())\n"
        path.write_text(content)
        head = content[: content.index(REGION_START_MARKER)]
        tail = content[content.index(REGION_STOP_MARKER) :]

        document = copy.deepcopy(STORE_DOC)
        document["components"]["schemas"]["Customer"]["properties"]["email"] = {"type": "string"}
        result = make_generator(tmp_path, document).generate()

        merged = path.read_text()
        assert result.files_updated == 1
        assert merged.startswith(head)
        assert merged.endswith(tail)
        assert "    email: str\n" in merged

    def test_artifact_moved_in_project_is_updated_in_place(self, tmp_path):
        """Test that an artifact found elsewhere in the project is merged where it is."""
        make_generator(tmp_path).generate()
        moved_dir = tmp_path / "app"
        moved_dir.mkdir()
        (tmp_path / "models" / "customer.py").rename(moved_dir / "customer.py")

        result = make_generator(tmp_path).generate()

        assert not (tmp_path / "models" / "customer.py").exists()
        assert moved_dir / "customer.py" in result.generated_files

    def test_fail_fast_stops_run(self, tmp_path):
        """Test that a failing schema aborts the run and keeps earlier artifacts."""
        generator = make_generator(tmp_path, registry=failing_registry(), style="failing")

        with pytest.raises(SchemaGenerationError) as exc_info:
            generator.generate()

        assert exc_info.value.schema_name == "Customer"
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert (tmp_path / "models" / "order.py").exists()
        assert not (tmp_path / "models" / "customer.py").exists()
        assert not (tmp_path / CACHE_FILE_NAME).exists()

    def test_continue_on_error_reports_failures(self, tmp_path):
        """Test that failures are collected when fail-fast is off."""
        result = make_generator(tmp_path, registry=failing_registry(), style="failing", fail_fast=False).generate()

        assert not result.success
        assert [f.schema_name for f in result.failures] == ["Customer"]
        assert result.schemas_processed == 2
        cache = (tmp_path / CACHE_FILE_NAME).read_text()
        assert "Order" in cache and "Customer" not in cache

    def test_boolean_property_schema_is_typed_any(self, tmp_path):
        """Test that a `true` property schema neither breaks linting nor generation."""
        document = {
            "openapi": "3.1.0",
            "components": {
                "schemas": {
                    "Envelope": {
                        "type": "object",
                        "required": ["payload"],
                        "properties": {"payload": True, "kind": {"type": "string"}},
                    },
                }
            },
        }
        result = make_generator(tmp_path, document).generate()

        assert result.success
        assert result.files_created == 1
        assert "    payload: Any\n" in module_text(tmp_path, "envelope")

    def test_missing_reference_still_generates(self, tmp_path):
        """Test that a dangling reference is linted and typed by its name."""
        document = {
            "openapi": "3.0.0",
            "components": {
                "schemas": {
                    "Holder": {"type": "object", "properties": {"thing": {"$ref": REF + "Missing"}}},
                }
            },
        }
        result = make_generator(tmp_path, document).generate()

        assert result.success
        assert [e.rule for e in result.errors] == [LintRuleId.MISSING_REF_TARGET]
        holder = module_text(tmp_path, "holder")
        assert "    thing: Missing\n" in holder
        assert "import Missing" not in holder

    def test_missing_reference_severity_is_configurable(self, tmp_path):
        document = {
            "openapi": "3.0.0",
            "components": {"schemas": {"Holder": {"type": "object", "properties": {"thing": {"$ref": REF + "Missing"}}}}},
        }
        lint = LintConfig()
        lint.rules[LintRuleId.MISSING_REF_TARGET] = LintSeverity.WARNING

        result = make_generator(tmp_path, document, lint=lint).generate()

        assert result.errors == []
        assert [w.rule for w in result.warnings] == [LintRuleId.MISSING_REF_TARGET]

    def test_alias_schemas_are_skipped(self, tmp_path):
        document = {
            "swagger": "2.0",
            "definitions": {
                "Email": {"type": "string"},
                "Person": {"type": "object", "properties": {"email": {"$ref": "#/definitions/Email"}}},
            },
        }
        result = make_generator(tmp_path, document).generate()

        assert [r.action for r in result.schema_results] == ["skipped", "created"]
        assert not (tmp_path / "models" / "email.py").exists()
        assert "    email: str\n" in module_text(tmp_path, "person")

    def test_no_schemas_is_fatal(self, tmp_path):
        with pytest.raises(SpecStructureError):
            make_generator(tmp_path, {"openapi": "3.0.0", "components": {}}).generate()

    def test_unknown_style(self, tmp_path):
        with pytest.raises(UnknownStyleError):
            make_generator(tmp_path, style="protobuf")

    def test_render_schema_does_not_write(self, tmp_path):
        region = make_generator(tmp_path).render_schema("Customer")

        assert '    """Someone who buys things."""' in region
        assert not (tmp_path / "models").exists()

    def test_summary_is_logged(self, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger="openapi_to_models"):
            make_generator(tmp_path).generate()
        assert "Generated 3 schema(s) (1 enum(s)): 3 created, 0 updated, 0 unchanged" in caplog.text
