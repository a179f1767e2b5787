"""Tests for reading and writing template files."""

import json

import pytest

from stack_splitter.core.exceptions import TemplateLoadError
from stack_splitter.core.template_loader import (
    dump_template,
    load_template,
    parse_template,
    save_template,
)


class TestLoadTemplate:
    """Test template parsing."""

    def test_load_json(self, fixtures_dir, raw_template):
        """Test loading a compiled JSON template."""
        template = load_template(fixtures_dir / "two_functions.json")

        assert template == raw_template

    def test_load_yaml_short_form(self, fixtures_dir):
        """Test that short-form intrinsics expand to their long form."""
        template = load_template(fixtures_dir / "single_function.yml")

        properties = template["Resources"]["HelloLambdaFunction"]["Properties"]
        assert properties["FunctionName"] == {"Fn::Sub": "${AWS::StackName}-hello"}
        assert template["AWSTemplateFormatVersion"] == "2010-09-09"

    def test_yaml_ref_and_get_att(self):
        """Test the tags that become references."""
        content = (
            "Resources:\n"
            "  Fn:\n"
            "    Type: AWS::Lambda::Function\n"
            "    Properties:\n"
            "      Role: !GetAtt Role.Arn\n"
            "      Queue: !Ref Queue\n"
            "      Joined: !Join [':', [a, b]]\n"
        )

        template = parse_template(content, yaml_format=True)

        properties = template["Resources"]["Fn"]["Properties"]
        assert properties["Role"] == {"Fn::GetAtt": ["Role", "Arn"]}
        assert properties["Queue"] == {"Ref": "Queue"}
        assert properties["Joined"] == {"Fn::Join": [":", ["a", "b"]]}

    def test_invalid_json(self):
        """Test that malformed content raises TemplateLoadError."""
        with pytest.raises(TemplateLoadError, match="Failed to parse template"):
            parse_template("{not json")

    def test_not_a_mapping(self):
        """Test that a top-level list is rejected."""
        with pytest.raises(TemplateLoadError, match="must be a mapping"):
            parse_template("[]")

    def test_missing_resources(self):
        """Test that a template needs a Resources mapping."""
        with pytest.raises(TemplateLoadError, match="Resources"):
            parse_template('{"AWSTemplateFormatVersion": "2010-09-09"}')

    def test_missing_file(self, tmp_path):
        """Test that an unreadable file raises TemplateLoadError."""
        with pytest.raises(TemplateLoadError, match="Failed to read template"):
            load_template(tmp_path / "missing.json")

    def test_error_names_file(self, tmp_path):
        """Test that parse errors mention the file."""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(TemplateLoadError, match="broken.json"):
            load_template(path)


class TestSaveTemplate:
    """Test template serialization."""

    def test_save_creates_directory(self, tmp_path, raw_template):
        """Test that the parent directory is created."""
        path = save_template(raw_template, tmp_path / "out" / "template.json")

        assert json.loads(path.read_text(encoding="utf-8")) == raw_template

    def test_dump_string_unchanged(self):
        """Test that pre-serialized templates are written verbatim."""
        assert dump_template("Resources: {}\n") == "Resources: {}\n"

    def test_dump_indented_json(self):
        """Test the JSON layout of written templates."""
        assert dump_template({"Resources": {}}) == '{\n  "Resources": {}\n}'
