import unittest
from pathlib import Path

from analyzer_plugins.domain.manifest import PluginManifest
from analyzer_plugins.domain.package import MaterializedPackage
from analyzer_plugins.domain.version import SemanticVersion
from pipeline.manifest import (
    PLUGIN_LANGUAGE,
    build_plugin_manifest,
    list_to_string,
    sanitize_manifest_value,
)


def _package(**overrides) -> MaterializedPackage:
    fields = dict(
        package_id="Foo.Bar",
        version=SemanticVersion.parse("1.2"),
        directory=Path("/tmp/Foo.Bar.1.2.0"),
    )
    fields.update(overrides)
    return MaterializedPackage(**fields)


class TestSanitizeManifestValue(unittest.TestCase):
    def test_each_cr_and_lf_becomes_one_space(self) -> None:
        self.assertEqual("a b  c   d", sanitize_manifest_value("a\nb\r\nc\r\r\nd"))

    def test_sanitize_is_idempotent(self) -> None:
        for raw in ["plain", "line1\nline2", "\r\n\r\n", "", "tab\tstays"]:
            with self.subTest(raw=raw):
                once = sanitize_manifest_value(raw)
                self.assertEqual(once, sanitize_manifest_value(once))

    def test_none_passes_through(self) -> None:
        self.assertIsNone(sanitize_manifest_value(None))


class TestListToString(unittest.TestCase):
    def test_join_without_escaping(self) -> None:
        self.assertEqual("Alice,Bob", list_to_string(["Alice", "Bob"]))
        self.assertEqual("A, Inc.,Bob", list_to_string(("A, Inc.", "Bob")))
        self.assertEqual("", list_to_string([]))

    def test_absent_list_stays_absent(self) -> None:
        self.assertIsNone(list_to_string(None))


class TestBuildPluginManifest(unittest.TestCase):
    def test_full_mapping(self) -> None:
        manifest = build_plugin_manifest(
            _package(
                title="Foo\nAnalyzers",
                description="Line one.\r\nLine two.",
                authors=("Alice", "Bob"),
                owners=("Contoso",),
                project_url="https://example.com/foo",
                license_url="https://example.com/license",
            )
        )

        self.assertEqual("Foo.Bar", manifest.key)
        self.assertEqual("Foo Analyzers", manifest.name)
        self.assertEqual("1.2.0", manifest.version)
        self.assertEqual(PLUGIN_LANGUAGE, manifest.language)
        self.assertEqual("Line one.  Line two.", manifest.description)
        self.assertEqual("Alice,Bob", manifest.developers)
        self.assertEqual("Contoso", manifest.organization)
        self.assertEqual("https://example.com/foo", manifest.homepage)
        self.assertEqual("https://example.com/license", manifest.license)

    def test_name_falls_back_to_key_for_blank_or_absent_title(self) -> None:
        for title in [None, "", "   "]:
            with self.subTest(title=title):
                self.assertEqual("Foo.Bar", build_plugin_manifest(_package(title=title)).name)

    def test_absent_fields_stay_absent(self) -> None:
        manifest = build_plugin_manifest(_package())
        self.assertIsNone(manifest.description)
        self.assertIsNone(manifest.developers)
        self.assertIsNone(manifest.organization)
        self.assertIsNone(manifest.homepage)
        self.assertIsNone(manifest.license)

    def test_manifest_rejects_multiline_values(self) -> None:
        with self.assertRaises(ValueError):
            PluginManifest(key="k", name="n", version="1.0.0", language="cs", description="a\nb")


if __name__ == "__main__":
    unittest.main()
