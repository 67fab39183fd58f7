import unittest
from pathlib import Path

from analyzer_plugins.domain.component import DiagnosticDescriptor, DiscoveredComponent
from tools.rules.generator import (
    NO_DESCRIPTION,
    build_description,
    build_tags,
    generate_rules,
    map_severity,
    normalize_tag,
)


def _component(type_name: str, *diagnostics: DiagnosticDescriptor) -> DiscoveredComponent:
    return DiscoveredComponent(
        assembly_path=Path("/pkg/analyzers/dotnet/cs/Foo.dll"),
        type_name=type_name,
        languages=("C#",),
        diagnostics=tuple(diagnostics),
    )


class TestSeverityAndTags(unittest.TestCase):
    def test_severity_map(self) -> None:
        self.assertEqual("CRITICAL", map_severity("Error"))
        self.assertEqual("MAJOR", map_severity("Warning"))
        self.assertEqual("MINOR", map_severity("Info"))
        self.assertEqual("INFO", map_severity("hidden"))
        self.assertEqual("MAJOR", map_severity("Something"))
        self.assertEqual("MAJOR", map_severity(None))

    def test_normalize_tag(self) -> None:
        self.assertEqual("naming", normalize_tag("Naming"))
        self.assertEqual("code-quality", normalize_tag("  Code Quality "))
        self.assertEqual("c#", normalize_tag("C#"))
        self.assertIsNone(normalize_tag("Compilation_End"))
        self.assertIsNone(normalize_tag(""))

    def test_category_first_then_custom_tags_deduped(self) -> None:
        diag = DiagnosticDescriptor(
            diagnostic_id="FOO001",
            category="Naming",
            custom_tags=("naming", "Telemetry", "NotConfigurable_", "telemetry"),
        )
        self.assertEqual(["naming", "telemetry"], build_tags(diag))


class TestDescription(unittest.TestCase):
    def test_description_falls_back_to_title_then_placeholder(self) -> None:
        self.assertEqual(
            "<p>Use &lt;T&gt; &amp; more</p>",
            build_description(DiagnosticDescriptor(diagnostic_id="X1", description="Use <T> & more")),
        )
        self.assertEqual("<p>Title</p>", build_description(DiagnosticDescriptor(diagnostic_id="X1", title="Title")))
        self.assertEqual(f"<p>{NO_DESCRIPTION}</p>", build_description(DiagnosticDescriptor(diagnostic_id="X1")))

    def test_help_link_is_appended(self) -> None:
        desc = build_description(
            DiagnosticDescriptor(diagnostic_id="X1", title="T", help_link_uri="https://example.com/X1?a=1&b=2")
        )
        self.assertIn('<a href="https://example.com/X1?a=1&amp;b=2">', desc)


class TestGenerateRules(unittest.TestCase):
    def test_one_rule_per_diagnostic_in_discovery_order(self) -> None:
        catalog = generate_rules(
            [
                _component(
                    "Foo.NamingAnalyzer",
                    DiagnosticDescriptor(diagnostic_id="FOO002", title="Name things", default_severity="Error"),
                    DiagnosticDescriptor(diagnostic_id="FOO001", title="Other"),
                ),
                _component("Foo.StyleAnalyzer", DiagnosticDescriptor(diagnostic_id="FOO003")),
            ]
        )

        self.assertEqual(3, catalog.count)
        self.assertEqual(["FOO002", "FOO001", "FOO003"], [r.key for r in catalog])

        first = catalog.get("FOO002")
        self.assertEqual("Name things", first.name)
        self.assertEqual("FOO002", first.internal_key)
        self.assertEqual("CRITICAL", first.severity)
        self.assertEqual("SINGLE", first.cardinality)
        self.assertEqual("READY", first.status)

        # Name falls back to the diagnostic id.
        self.assertEqual("FOO003", catalog.get("FOO003").name)

    def test_duplicate_ids_keep_first_and_warn(self) -> None:
        with self.assertLogs("tools.rules.generator", level="WARNING") as logs:
            catalog = generate_rules(
                [
                    _component("A", DiagnosticDescriptor(diagnostic_id="DUP1", title="first")),
                    _component("B", DiagnosticDescriptor(diagnostic_id="DUP1", title="second")),
                ]
            )

        self.assertEqual(1, catalog.count)
        self.assertEqual("first", catalog.get("DUP1").name)
        self.assertTrue(any("DUP1" in line for line in logs.output))

    def test_components_without_diagnostics_yield_empty_catalog(self) -> None:
        catalog = generate_rules([_component("Empty")])
        self.assertIsNotNone(catalog)
        self.assertEqual(0, catalog.count)


if __name__ == "__main__":
    unittest.main()
