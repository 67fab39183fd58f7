"""tools.rules.generator

Pure mapping from discovered analyzers to SonarQube rule records.

One rule per supported diagnostic. Diagnostic ids are the rule keys, so an id
declared twice (by two analyzers, or twice by the same one) produces a single
rule: the first declaration wins and the duplicate is reported.

Notes:
- SonarQube has no notion of a "hidden" diagnostic; ``Hidden`` maps to
  ``INFO`` so the rule still exists and can be activated.
- Rule tags must be lowercase and limited to ``[a-z0-9+#.-]``. Custom tags
  that cannot be expressed that way are dropped.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Dict, Iterable, List, Optional

from analyzer_plugins.domain.component import DiagnosticDescriptor, DiscoveredComponent
from analyzer_plugins.domain.rules import Rule, RuleCatalog

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description was provided."

SEVERITY_MAP: Dict[str, str] = {
    "error": "CRITICAL",
    "warning": "MAJOR",
    "info": "MINOR",
    "hidden": "INFO",
}
DEFAULT_RULE_SEVERITY = "MAJOR"

_TAG_ALLOWED = re.compile(r"^[a-z0-9+#.-]+$")


def _dedupe_preserve_order(items: Iterable[str]) -> List[str]:
    """Remove duplicates while preserving order."""
    seen: set[str] = set()
    out: List[str] = []
    for x in items:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def map_severity(diagnostic_severity: Optional[str]) -> str:
    return SEVERITY_MAP.get((diagnostic_severity or "").strip().lower(), DEFAULT_RULE_SEVERITY)


def normalize_tag(raw: str) -> Optional[str]:
    tag = re.sub(r"\s+", "-", (raw or "").strip().lower())
    if not tag or not _TAG_ALLOWED.match(tag):
        return None
    return tag


def build_tags(diagnostic: DiagnosticDescriptor) -> List[str]:
    raw: List[str] = []
    if diagnostic.category:
        raw.append(diagnostic.category)
    raw.extend(diagnostic.custom_tags)

    tags = []
    for t in raw:
        norm = normalize_tag(t)
        if norm:
            tags.append(norm)
    return _dedupe_preserve_order(tags)


def build_description(diagnostic: DiagnosticDescriptor) -> str:
    """HTML description shown on the rule page."""
    text = diagnostic.description or diagnostic.title or NO_DESCRIPTION
    out = f"<p>{html.escape(text.strip())}</p>"
    if diagnostic.help_link_uri:
        uri = html.escape(diagnostic.help_link_uri.strip(), quote=True)
        out += f'<p><a href="{uri}">{uri}</a></p>'
    return out


def rule_from_diagnostic(diagnostic: DiagnosticDescriptor) -> Rule:
    return Rule(
        key=diagnostic.diagnostic_id,
        name=(diagnostic.title or diagnostic.diagnostic_id).strip(),
        internal_key=diagnostic.diagnostic_id,
        description=build_description(diagnostic),
        severity=map_severity(diagnostic.default_severity),
        tags=tuple(build_tags(diagnostic)),
    )


def generate_rules(components: Iterable[DiscoveredComponent]) -> RuleCatalog:
    rules: List[Rule] = []
    seen: set[str] = set()

    for comp in components:
        for diagnostic in comp.diagnostics:
            if diagnostic.diagnostic_id in seen:
                logger.warning(
                    "Duplicate diagnostic id %s (declared again by %s); keeping the first definition",
                    diagnostic.diagnostic_id,
                    comp.type_name,
                )
                continue
            seen.add(diagnostic.diagnostic_id)
            rules.append(rule_from_diagnostic(diagnostic))

    return RuleCatalog.from_rules(rules)
