"""
Unit Tests for Manifest Generation
"""

import xml.etree.ElementTree as ET

import pytest

from qti_toolkit.builder.identifiers import IdentifierFactory
from qti_toolkit.builder.qti.items import generate_emq_stimulus, generate_mcq_item
from qti_toolkit.builder.qti.manifest import (
    ITEM_RESOURCE_TYPE,
    TEST_RESOURCE_TYPE,
    generate_manifest,
)
from qti_toolkit.core.models import MCQQuestion, Option, QuestionMetadata, UsageStatistics

NS = {
    "cp": "http://www.imsglobal.org/xsd/imscp_v1p1",
    "imsmd": "http://www.imsglobal.org/xsd/imsmd_v1p2",
}


@pytest.fixture
def items():
    ids = IdentifierFactory()
    question = MCQQuestion(
        item_id="1",
        text="Q",
        options=(Option("A", "x"),),
        correct_answer="A",
        metadata=QuestionMetadata(
            profile={"specialty": "Cardiology"},
            last_use_statistics=UsageStatistics(examination_year="2019"),
        ),
    )
    return [
        generate_emq_stimulus("10", (Option("A", "x"),), None, ids),
        generate_mcq_item(question, ids),
    ]


class TestGenerateManifest:
    """Tests for generate_manifest()."""

    def test_generate_when_called_then_title_in_lom(self, items):
        root = ET.fromstring(generate_manifest(items, "Cardiology & Renal", IdentifierFactory()))
        title = root.find("cp:metadata/imsmd:lom/imsmd:general/imsmd:title/imsmd:string", NS)
        assert title.text == "Cardiology & Renal"
        assert root.find("cp:metadata/cp:schemaversion", NS).text == "2.1"

    def test_generate_when_called_then_test_resource_depends_on_every_item(self, items):
        root = ET.fromstring(generate_manifest(items, "T", IdentifierFactory()))
        resources = root.findall("cp:resources/cp:resource", NS)

        test_resource = resources[0]
        assert test_resource.get("type") == TEST_RESOURCE_TYPE
        assert test_resource.get("href") == "assessment.xml"
        assert [d.get("identifierref") for d in test_resource.findall("cp:dependency", NS)] == [
            item.identifier for item in items
        ]

    def test_generate_when_called_then_resource_per_item(self, items):
        root = ET.fromstring(generate_manifest(items, "T", IdentifierFactory()))
        resources = root.findall("cp:resources/cp:resource", NS)[1:]

        assert [r.get("identifier") for r in resources] == [item.identifier for item in items]
        assert {r.get("type") for r in resources} == {ITEM_RESOURCE_TYPE}
        for resource, item in zip(resources, items):
            assert resource.get("href") == item.filename
            assert resource.find("cp:file", NS).get("href") == item.filename

    def test_generate_when_metadata_off_then_no_keywords(self, items):
        manifest = generate_manifest(items, "T", IdentifierFactory())
        assert "imsmd:keyword" not in manifest

    def test_generate_when_metadata_on_then_keywords_for_items_with_metadata(self, items):
        root = ET.fromstring(
            generate_manifest(items, "T", IdentifierFactory(), include_metadata=True)
        )
        stimulus, question = root.findall("cp:resources/cp:resource", NS)[1:]

        assert stimulus.find("cp:metadata", NS) is None
        keywords = question.findall(
            "cp:metadata/imsmd:lom/imsmd:general/imsmd:keyword/imsmd:string", NS
        )
        assert [k.text for k in keywords] == ["specialty: Cardiology", "examination_year: 2019"]
