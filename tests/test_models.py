"""Tests for stack splitter Pydantic models."""

import pytest
from pydantic import ValidationError

from stack_splitter.models import (
    AttributeReference,
    DependencyGraph,
    NestedStack,
    PlainReference,
    ReferenceSite,
)


class TestReferences:
    """Test suite for the reference expression variants."""

    def test_plain_reference_expression(self):
        """Test that a plain reference renders as Ref."""
        assert PlainReference(target="Bucket").to_expression() == {"Ref": "Bucket"}

    def test_attribute_reference_keeps_notation(self):
        """Test that attribute references render in their original notation."""
        listed = AttributeReference(target="Role", attribute="Arn")
        dotted = AttributeReference(target="Role", attribute="Arn", dotted=True)

        assert listed.to_expression() == {"Fn::GetAtt": ["Role", "Arn"]}
        assert dotted.to_expression() == {"Fn::GetAtt": "Role.Arn"}

    def test_key_ignores_notation(self):
        """Test that both notations of one lookup share a key."""
        listed = AttributeReference(target="Role", attribute="Arn")
        dotted = AttributeReference(target="Role", attribute="Arn", dotted=True)

        assert listed.key == dotted.key
        assert listed.key != PlainReference(target="Role").key

    def test_suffix_is_alphanumeric(self):
        """Test attribute suffixes usable in logical ids."""
        assert AttributeReference(target="Db", attribute="Endpoint.Address").suffix == (
            "EndpointAddress"
        )
        assert PlainReference(target="Db").suffix == "Ref"

    def test_references_are_frozen(self):
        """Test that references are immutable."""
        reference = PlainReference(target="Bucket")

        with pytest.raises(ValidationError):
            reference.target = "Other"

    def test_site_discriminates_variants(self):
        """Test that a reference site validates raw data into the right variant."""
        site = ReferenceSite.model_validate(
            {
                "path": ["Properties", 0],
                "reference": {"kind": "attribute", "target": "Role", "attribute": "Arn"},
            }
        )

        assert isinstance(site.reference, AttributeReference)
        assert site.path == ("Properties", 0)


class TestDependencyGraph:
    """Test suite for DependencyGraph model."""

    def test_serializes_with_camel_case_edges(self):
        """Test that the dict form uses outgoingEdges / incomingEdges."""
        graph = DependencyGraph(
            nodes=["A", "B"],
            outgoing_edges={"A": ["B"], "B": []},
            incoming_edges={"A": [], "B": ["A"]},
        )

        assert graph.to_dict() == {
            "nodes": ["A", "B"],
            "outgoingEdges": {"A": ["B"], "B": []},
            "incomingEdges": {"A": [], "B": ["A"]},
        }

    def test_accepts_camel_case_input(self):
        """Test loading a graph from its serialized form."""
        graph = DependencyGraph.model_validate(
            {"nodes": ["A"], "outgoingEdges": {"A": []}, "incomingEdges": {"A": []}}
        )

        assert graph.dependencies_of("A") == []
        assert graph.dependents_of("missing") == []


class TestNestedStack:
    """Test suite for NestedStack model."""

    def test_file_name_from_template_url(self):
        """Test that the local file name is the last TemplateURL segment."""
        stack = NestedStack(
            index=1,
            anchor="HelloLambdaFunction",
            logical_id="NestedStack1",
            stack_template='{ "nestedStack": "nested-stack-1" }',
            stack_resource={
                "NestedStack1": {
                    "Properties": {
                        "TemplateURL": "s3-bucket/cloudformation-template-nested-stack-1.json"
                    }
                }
            },
        )

        assert stack.file_name == "cloudformation-template-nested-stack-1.json"
        assert stack.template_url == "s3-bucket/cloudformation-template-nested-stack-1.json"
