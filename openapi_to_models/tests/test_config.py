"""
Tests for the YAML configuration.
"""

from __future__ import annotations

import pytest

from openapi_to_models.pipeline import ConfigError, GeneratorConfig, load_config
from openapi_to_models.pipeline.config import DEFAULT_CONFIG_FILE
from openapi_to_models.pipeline.lint import LintRuleId, LintSeverity

CONFIG_YAML = """\
defaultStyle: pydantic
outputDir: lib/models
useJsonKey: true
failFast: false
lint:
  rules:
    missing_type: error
    suspicious-id-field: off
schemas:
  user:
    className: Account
    fieldNames:
      e-mail: contact_email
    typeMapping:
      integer: Decimal
    useJsonKey: false
"""


class TestGeneratorConfig:
    """Tests for GeneratorConfig and load_config."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.style == "dataclass"
        assert config.output_dir == "models"
        assert config.fail_fast
        assert not config.changed_only

    def test_load_default_file(self, tmp_path):
        """Test loading the configuration file of a project directory."""
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(CONFIG_YAML)

        config = load_config(project_dir=tmp_path)

        assert config.style == "pydantic"
        assert config.output_dir == "lib/models"
        assert config.project_dir == str(tmp_path)
        assert config.use_json_key
        assert not config.fail_fast
        assert config.lint.severity_of(LintRuleId.MISSING_TYPE) is LintSeverity.ERROR
        assert not config.lint.is_enabled(LintRuleId.SUSPICIOUS_ID_FIELD)

        override = config.override_for("user")
        assert override.class_name == "Account"
        assert override.field_names == {"e-mail": "contact_email"}
        assert override.type_mapping == {"integer": "Decimal"}
        assert not config.use_json_key_for("user")
        assert config.use_json_key_for("other")

    def test_snake_case_keys(self):
        config = GeneratorConfig.from_dict({"style": "dataclasses_json", "output_dir": "out", "changed_only": True})
        assert config.style == "dataclasses_json"
        assert config.output_dir == "out"
        assert config.changed_only

    def test_no_file_gives_defaults(self, tmp_path):
        config = load_config(project_dir=tmp_path)
        assert config.style == "dataclass"
        assert config.project_dir == str(tmp_path)

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("style: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_shapes(self):
        with pytest.raises(ConfigError):
            GeneratorConfig.from_dict(["style"])
        with pytest.raises(ConfigError):
            GeneratorConfig.from_dict({"schemas": ["user"]})

    def test_to_dict_round_trip(self, tmp_path):
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(CONFIG_YAML)
        config = load_config(project_dir=tmp_path)

        again = GeneratorConfig.from_dict(config.to_dict())

        assert again == config
