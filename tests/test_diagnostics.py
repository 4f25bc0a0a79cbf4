"""Tests for marker diagnostics."""

from i18nkit.diagnostics import MarkerErrorCounter, build_diagnostic, render_call_source
from i18nkit.lexer import significant_tokens
from i18nkit.structures import MarkerDiagnostic


def diagnostic(file):
    return MarkerDiagnostic(file=file, line=1, marker="__", source="$x)")


class TestRender:
    def test_render_stops_at_matching_parenthesis(self):
        tokens = significant_tokens("<?php __(a(b), 'c'); echo ')';")
        assert render_call_source(tokens, 2) == "a(b),'c')"

    def test_build_diagnostic(self):
        tokens = significant_tokens("<?php\n\n__n($one);")
        built = build_diagnostic(tokens, file="x.php", marker_index=1)
        assert built == MarkerDiagnostic(file="x.php", line=3, marker="__n", source="$one)")


class TestCounter:
    """Test counting outside the framework core."""

    def test_counts_every_diagnostic_without_core(self):
        counter = MarkerErrorCounter()
        assert counter.register(diagnostic("/app/a.php"))
        assert counter.register(diagnostic("/app/a.php"))
        assert counter.total == 2

    def test_core_files_are_ignored(self, tmp_path):
        core = tmp_path / "vendor" / "cake"
        counter = MarkerErrorCounter(str(core))
        assert not counter.register(diagnostic(str(core / "basics.php")))
        assert counter.register(diagnostic(str(tmp_path / "src" / "a.php")))
        assert counter.total == 1
        assert counter.ignored == 1

    def test_sibling_directory_is_not_core(self, tmp_path):
        counter = MarkerErrorCounter(str(tmp_path / "cake"))
        assert counter.register(diagnostic(str(tmp_path / "cake-app" / "a.php")))
        assert counter.total == 1
        assert counter.ignored == 0
