"""tools/jar/packager.py

Assemble the plugin archive from a manifest and a rules file.

The archive is a plain jar (zip) with:

    META-INF/MANIFEST.MF          plugin identity (Plugin-* attributes)
    resources/plugin.properties   language + rule repository settings
    resources/rules.xml           the rule catalog

Output is deterministic: entries are written in a fixed order with fixed
timestamps and permissions, so identical inputs produce byte-identical jars.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from analyzer_plugins.domain.manifest import PluginManifest
from analyzer_plugins.io.fs import write_bytes_atomic

from .manifest_mf import format_manifest

logger = logging.getLogger(__name__)

CREATED_BY = "analyzer-plugin-generator"
PLUGIN_CLASS = "org.sonar.plugins.roslyn.AnalyzerRulesPlugin"

MANIFEST_ENTRY = "META-INF/MANIFEST.MF"
PROPERTIES_ENTRY = "resources/plugin.properties"
RULES_ENTRY = "resources/rules.xml"

# Earliest timestamp a zip entry can carry.
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def manifest_attributes(manifest: PluginManifest, *, plugin_class: str = PLUGIN_CLASS) -> List[Tuple[str, str]]:
    attrs: List[Tuple[str, str]] = [
        ("Manifest-Version", "1.0"),
        ("Created-By", CREATED_BY),
        ("Plugin-Key", manifest.key),
        ("Plugin-Name", manifest.name),
        ("Plugin-Version", manifest.version),
        ("Plugin-Class", plugin_class),
    ]
    optional = [
        ("Plugin-Description", manifest.description),
        ("Plugin-Developers", manifest.developers),
        ("Plugin-Organization", manifest.organization),
        ("Plugin-Homepage", manifest.homepage),
        ("Plugin-License", manifest.license),
    ]
    attrs.extend((name, value) for name, value in optional if value is not None)
    return attrs


def _escape_property(value: str) -> str:
    out = []
    for i, ch in enumerate(value):
        if ch == "\\":
            out.append("\\\\")
        elif ch in "=:#!":
            out.append("\\" + ch)
        elif ch == " " and i == 0:
            out.append("\\ ")
        elif ord(ch) > 0xFFFF:
            # astral characters become a UTF-16 surrogate pair
            code = ord(ch) - 0x10000
            out.append(f"\\u{0xD800 + (code >> 10):04x}\\u{0xDC00 + (code & 0x3FF):04x}")
        elif ord(ch) > 0x7E or ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


def repository_key(manifest: PluginManifest) -> str:
    return f"roslyn.{manifest.key}"


def plugin_properties(manifest: PluginManifest) -> bytes:
    props = [
        ("plugin.key", manifest.key),
        ("plugin.name", manifest.name),
        ("plugin.version", manifest.version),
        ("plugin.language", manifest.language),
        ("repository.key", repository_key(manifest)),
        ("repository.name", manifest.name),
        ("rules.resource", "/" + RULES_ENTRY),
    ]
    text = "".join(f"{k}={_escape_property(v)}\n" for k, v in props)
    return text.encode("ascii")


def _add_entry(zf: zipfile.ZipFile, name: str, data: bytes) -> None:
    info = zipfile.ZipInfo(name, date_time=_FIXED_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.create_system = 3
    info.external_attr = 0o644 << 16
    zf.writestr(info, data)


def build_jar_bytes(manifest: PluginManifest, rules_xml: bytes, *, plugin_class: Optional[str] = None) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        _add_entry(zf, MANIFEST_ENTRY, format_manifest(manifest_attributes(manifest, plugin_class=plugin_class or PLUGIN_CLASS)))
        _add_entry(zf, PROPERTIES_ENTRY, plugin_properties(manifest))
        _add_entry(zf, RULES_ENTRY, rules_xml)
    return buf.getvalue()


def build_plugin_jar(
    manifest: PluginManifest,
    rules_path: Union[str, Path],
    jar_path: Union[str, Path],
) -> Path:
    """Write the plugin jar to jar_path. Raises FileNotFoundError if rules_path is missing."""
    rules = Path(rules_path)
    if not rules.is_file():
        raise FileNotFoundError(f"Rules file not found: {rules}")

    out = Path(jar_path)
    write_bytes_atomic(out, build_jar_bytes(manifest, rules.read_bytes()))
    logger.debug("Wrote plugin archive %s", out)
    return out
