"""
Module: builder.qti.manifest

Purpose:
    IMS Content Package (v1p1) manifest naming every generated document:
    one resource per item/stimulus/context document plus the assessment
    test resource, which depends on all of them.

Key Functions:
    - generate_manifest(): Items → imsmanifest.xml content

Used By:
    - builder.controller
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from qti_toolkit.core.models import ASSESSMENT_FILENAME, QTIItem

from ..identifiers import IdentifierFactory
from .escaping import escape_xml

logger = logging.getLogger(__name__)

MANIFEST_SCHEMA_LOCATION = (
    "http://www.imsglobal.org/xsd/imscp_v1p1 "
    "http://www.imsglobal.org/xsd/qti/qtiv2p1/imscp_v1p1.xsd "
    "http://www.imsglobal.org/xsd/imsmd_v1p2 "
    "http://www.imsglobal.org/xsd/qti/qtiv2p1/imsmd_v1p2p2.xsd "
    "http://www.imsglobal.org/xsd/imsqti_v2p1 "
    "http://www.imsglobal.org/xsd/qti/qtiv2p1/imsqti_v2p1.xsd"
)

TEST_RESOURCE_TYPE = "imsqti_test_xmlv2p1"
ITEM_RESOURCE_TYPE = "imsqti_item_xmlv2p1"


def _keyword_metadata(item: QTIItem) -> str:
    """LOM keywords for an item resource ("" when it has no metadata)."""
    if item.metadata is None:
        return ""
    keywords = item.metadata.keywords()
    if not keywords:
        return ""
    entries = "".join(
        "            <imsmd:keyword>\n"
        f'              <imsmd:string language="en">{escape_xml(keyword)}</imsmd:string>\n'
        "            </imsmd:keyword>\n"
        for keyword in keywords
    )
    return (
        "      <metadata>\n"
        "        <imsmd:lom>\n"
        "          <imsmd:general>\n"
        f"{entries}"
        "          </imsmd:general>\n"
        "        </imsmd:lom>\n"
        "      </metadata>\n"
    )


def _resource(item: QTIItem, include_metadata: bool) -> str:
    metadata = _keyword_metadata(item) if include_metadata else ""
    return (
        f'    <resource identifier="{item.identifier}" type="{ITEM_RESOURCE_TYPE}" '
        f'href="{item.filename}">\n'
        f"{metadata}"
        f'      <file href="{item.filename}"/>\n'
        "    </resource>\n"
    )


def generate_manifest(
    items: Sequence[QTIItem],
    title: str,
    identifiers: IdentifierFactory,
    *,
    include_metadata: bool = False,
) -> str:
    """
    Build imsmanifest.xml.

    Args:
        items: Generated documents in emission order
        title: Assessment title (LOM general title)
        identifiers: Identifier source of the package
        include_metadata: Attach question profile/statistics as LOM keywords

    Returns:
        Manifest XML
    """
    manifest_id = identifiers.new("manifest")
    assessment_id = identifiers.new("assessment")

    dependencies: List[str] = [
        f'      <dependency identifierref="{item.identifier}"/>\n' for item in items
    ]
    resources: List[str] = [_resource(item, include_metadata) for item in items]

    logger.debug(f"Manifest: {len(items)} item resources")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<manifest identifier="{manifest_id}"\n'
        '          xmlns="http://www.imsglobal.org/xsd/imscp_v1p1"\n'
        '          xmlns:imsmd="http://www.imsglobal.org/xsd/imsmd_v1p2"\n'
        '          xmlns:imsqti="http://www.imsglobal.org/xsd/imsqti_v2p1"\n'
        '          xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
        f'          xsi:schemaLocation="{MANIFEST_SCHEMA_LOCATION}">\n'
        "  <metadata>\n"
        "    <schema>QTI Package</schema>\n"
        "    <schemaversion>2.1</schemaversion>\n"
        "    <imsmd:lom>\n"
        "      <imsmd:general>\n"
        "        <imsmd:title>\n"
        f'          <imsmd:string language="en">{escape_xml(title)}</imsmd:string>\n'
        "        </imsmd:title>\n"
        "      </imsmd:general>\n"
        "    </imsmd:lom>\n"
        "  </metadata>\n"
        "  <organizations/>\n"
        "  <resources>\n"
        f'    <resource identifier="{assessment_id}" type="{TEST_RESOURCE_TYPE}" '
        f'href="{ASSESSMENT_FILENAME}">\n'
        f'      <file href="{ASSESSMENT_FILENAME}"/>\n'
        + "".join(dependencies)
        + "    </resource>\n"
        + "".join(resources)
        + "  </resources>\n"
        "</manifest>"
    )
