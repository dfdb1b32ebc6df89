"""Tests for dotted-path access into YAML documents."""

from __future__ import annotations

import pytest
import yaml

from cv_generator.models.results import YamlPathError
from cv_generator.yaml_path import (
    get_nested_value,
    set_nested_value,
    split_path,
    update_yaml_document,
)

RESUME_YAML = """\
name: John Doe
workExperience:
  - position: Engineer
    company: Acme
    bubbles:
      - Python
      - Go
  - position: Intern
    company: Initech
"""


class TestGetNestedValue:
    """Tests for get_nested_value."""

    def test_reads_mapping_and_sequence_segments(self) -> None:
        document = yaml.safe_load(RESUME_YAML)

        assert get_nested_value(document, "name") == "John Doe"
        assert get_nested_value(document, "workExperience.0.bubbles.1") == "Go"
        assert get_nested_value(document, "workExperience.1.company") == "Initech"

    def test_missing_segments_return_none(self) -> None:
        document = yaml.safe_load(RESUME_YAML)

        assert get_nested_value(document, "missing") is None
        assert get_nested_value(document, "workExperience.5.position") is None
        assert get_nested_value(document, "name.first") is None
        assert get_nested_value(document, "workExperience.0.bubbles.0.x") is None

    def test_numeric_key_on_mapping(self) -> None:
        """Test that YAML integer keys are reachable by numeric segments."""
        document = yaml.safe_load("years:\n  2020: remote\n")

        assert get_nested_value(document, "years.2020") == "remote"


class TestSetNestedValue:
    """Tests for set_nested_value."""

    def test_autovivifies_list_then_mapping(self) -> None:
        document: dict = {}

        set_nested_value(document, "a.0.b", "v")

        assert document == {"a": [{"b": "v"}]}

    def test_autovivifies_nested_mappings(self) -> None:
        document: dict = {}

        set_nested_value(document, "contact.links.github", "gh/john")

        assert document == {"contact": {"links": {"github": "gh/john"}}}

    def test_replaces_sequence_item(self) -> None:
        document = yaml.safe_load(RESUME_YAML)

        set_nested_value(document, "workExperience.0.bubbles.1", "Rust")

        assert document["workExperience"][0]["bubbles"] == ["Python", "Rust"]
        assert document["workExperience"][1]["position"] == "Intern"

    def test_index_one_past_end_appends(self) -> None:
        document = {"skills": ["Python"]}

        set_nested_value(document, "skills.1", "SQL")

        assert document["skills"] == ["Python", "SQL"]

    def test_index_leaving_a_gap_raises(self) -> None:
        document = {"skills": ["Python"]}

        with pytest.raises(YamlPathError, match="Index 2 out of range at path skills"):
            set_nested_value(document, "skills.2", "SQL")

        assert document["skills"] == ["Python"]

    def test_huge_index_is_rejected_without_allocating(self) -> None:
        document = {"skills": []}

        with pytest.raises(YamlPathError, match="out of range"):
            set_nested_value(document, "skills.9999999999", "SQL")

        assert document == {"skills": []}

    def test_huge_intermediate_index_is_rejected(self) -> None:
        document: dict = {}

        with pytest.raises(YamlPathError):
            set_nested_value(document, "a.100000000.b", "v")

    def test_numeric_segment_on_mapping_raises(self) -> None:
        document = {"workExperience": {"position": "Engineer"}}

        with pytest.raises(YamlPathError, match="Expected array at path workExperience"):
            set_nested_value(document, "workExperience.0.position", "Lead")

    def test_key_segment_on_scalar_raises(self) -> None:
        document = {"name": "John"}

        with pytest.raises(YamlPathError, match="Expected object at path name"):
            set_nested_value(document, "name.first", "John")

    def test_empty_path_raises(self) -> None:
        with pytest.raises(YamlPathError):
            set_nested_value({}, "", 1)
        with pytest.raises(YamlPathError):
            split_path("a..b")


class TestUpdateYamlDocument:
    """Tests for whole-document updates."""

    def test_updates_one_field_and_keeps_the_rest(self) -> None:
        updated = update_yaml_document(RESUME_YAML, "workExperience.1.position", "Developer")

        document = yaml.safe_load(updated)
        assert document["workExperience"][1]["position"] == "Developer"
        assert document["name"] == "John Doe"
        assert document["workExperience"][0]["bubbles"] == ["Python", "Go"]

    def test_preserves_key_order(self) -> None:
        updated = update_yaml_document("zeta: 1\nalpha: 2\n", "alpha", 3)

        assert updated.index("zeta") < updated.index("alpha")

    def test_empty_document_counts_as_mapping(self) -> None:
        updated = update_yaml_document("", "metadata.name", "Backend")

        assert yaml.safe_load(updated) == {"metadata": {"name": "Backend"}}

    def test_invalid_yaml_raises(self) -> None:
        with pytest.raises(yaml.YAMLError):
            update_yaml_document("age: [invalid yaml structure", "age", 1)
