"""tools.rules.rules_xml

Read/write the SonarQube ``rules.xml`` rule definition file::

    <?xml version='1.0' encoding='utf-8'?>
    <rules>
      <rule>
        <key>FOO001</key>
        <name>...</name>
        <internalKey>FOO001</internalKey>
        <description>...</description>
        <severity>MAJOR</severity>
        <cardinality>SINGLE</cardinality>
        <status>READY</status>
        <tag>naming</tag>
      </rule>
    </rules>

Writes are atomic (see :mod:`analyzer_plugins.io.fs`).
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Union

from analyzer_plugins.domain.rules import CARDINALITY_SINGLE, STATUS_READY, Rule, RuleCatalog
from analyzer_plugins.io.fs import write_text_atomic

logger = logging.getLogger(__name__)


def _sub(parent: ET.Element, tag: str, text: str) -> None:
    ET.SubElement(parent, tag).text = text


def rules_to_xml(catalog: RuleCatalog) -> str:
    root = ET.Element("rules")
    for r in catalog:
        el = ET.SubElement(root, "rule")
        _sub(el, "key", r.key)
        _sub(el, "name", r.name)
        _sub(el, "internalKey", r.internal_key)
        _sub(el, "description", r.description)
        _sub(el, "severity", r.severity)
        _sub(el, "cardinality", r.cardinality)
        _sub(el, "status", r.status)
        for t in r.tags:
            _sub(el, "tag", t)

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return "<?xml version='1.0' encoding='utf-8'?>\n" + body + "\n"


def save_rules_xml(catalog: RuleCatalog, path: Union[str, Path]) -> Path:
    out = Path(path)
    write_text_atomic(out, rules_to_xml(catalog))
    logger.debug("Wrote %d rules to %s", catalog.count, out)
    return out


def load_rules_xml(path: Union[str, Path]) -> RuleCatalog:
    """Parse a rules.xml back into a catalog. Raises ValueError on bad input."""
    try:
        root = ET.parse(str(path)).getroot()
    except ET.ParseError as e:
        raise ValueError(f"Malformed rules file {path}: {e}") from e
    if root.tag != "rules":
        raise ValueError(f"Expected <rules> root element in {path}, got <{root.tag}>")

    rules: List[Rule] = []
    for el in root.findall("rule"):
        key = (el.findtext("key") or "").strip()
        rules.append(
            Rule(
                key=key,
                name=el.findtext("name") or key,
                internal_key=el.findtext("internalKey") or key,
                description=el.findtext("description") or "",
                severity=(el.findtext("severity") or "MAJOR").strip(),
                cardinality=(el.findtext("cardinality") or CARDINALITY_SINGLE).strip(),
                status=(el.findtext("status") or STATUS_READY).strip(),
                tags=tuple((t.text or "").strip() for t in el.findall("tag") if (t.text or "").strip()),
            )
        )
    return RuleCatalog.from_rules(rules)
