from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from analyzer_plugins.domain.rules import Rule, RuleCatalog
from tools.rules.rules_xml import load_rules_xml, rules_to_xml, save_rules_xml


def _catalog() -> RuleCatalog:
    return RuleCatalog.from_rules(
        [
            Rule(
                key="FOO001",
                name="Names & <things>",
                internal_key="FOO001",
                description="<p>Use PascalCase</p>",
                severity="CRITICAL",
                tags=("naming", "c#"),
            ),
            Rule(key="FOO002", name="Other", internal_key="FOO002", description="<p>x</p>"),
        ]
    )


def test_rules_xml_layout(tmp_path: Path) -> None:
    out = save_rules_xml(_catalog(), tmp_path / "rules.xml")

    raw = out.read_bytes()
    assert raw.startswith(b"<?xml version='1.0' encoding='utf-8'?>")

    root = ET.fromstring(raw)
    assert root.tag == "rules"
    rules = root.findall("rule")
    assert [r.findtext("key") for r in rules] == ["FOO001", "FOO002"]

    first = rules[0]
    assert [child.tag for child in first] == [
        "key",
        "name",
        "internalKey",
        "description",
        "severity",
        "cardinality",
        "status",
        "tag",
        "tag",
    ]
    assert first.findtext("name") == "Names & <things>"
    assert first.findtext("description") == "<p>Use PascalCase</p>"
    assert [t.text for t in first.findall("tag")] == ["naming", "c#"]


def test_save_then_load_preserves_catalog(tmp_path: Path) -> None:
    catalog = _catalog()
    path = save_rules_xml(catalog, tmp_path / "nested" / "rules.xml")
    assert load_rules_xml(path) == catalog


def test_empty_catalog_writes_empty_rules_element() -> None:
    root = ET.fromstring(rules_to_xml(RuleCatalog()).split("\n", 1)[1])
    assert root.tag == "rules"
    assert list(root) == []


@pytest.mark.parametrize(
    "content",
    [
        "<rules><rule>",
        "<notrules/>",
        "<rules><rule><key>X</key><severity>SEVERE</severity></rule></rules>",
    ],
)
def test_load_rejects_bad_files(tmp_path: Path, content: str) -> None:
    path = tmp_path / "rules.xml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_rules_xml(path)
