"""
Tests for emitforge.registry
============================

- TestExtractTemplateName: Path naming convention
- TestBuild: Registry construction and collisions
- TestQueries: has_template / try_render / get_file_path
- TestLoadCandidates: Discovery from disk
"""

import logging
from pathlib import Path

import pytest

from emitforge.registry import (
    TemplateCandidate,
    UserTemplateRegistry,
    extract_template_name,
    load_candidates,
)
from emitforge.renderer import RenderFailure, RenderSuccess


# =============================================================================
# Naming Convention
# =============================================================================

class TestExtractTemplateName:
    """Tests for extract_template_name."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("Templates/Ids/StrongId.py.j2", "Ids/StrongId"),
            ("Templates/TestProject/Widget.jinja", "TestProject/Widget"),
            ("/repo/Templates/Ids/StrongId.py.j2", "Ids/StrongId"),
            ("C:\\repo\\Templates\\Ids\\StrongId.py.j2", "Ids/StrongId"),
            ("Templates/Acme.Ids/StrongId.py.j2", "Acme.Ids/StrongId"),
            ("Templates/A/B/C.txt", "A/B/C"),
            ("Templates/Solo.j2", "Solo"),
            ("/x/Templates/app/Templates/Ids/Id.j2", "Ids/Id"),
        ],
    )
    def test_matching_paths(self, path: str, expected: str) -> None:
        assert extract_template_name(path) == expected

    @pytest.mark.parametrize(
        "path",
        [
            "src/Widget.py.j2",
            "templates/Ids/StrongId.py.j2",
            "MyTemplates/Ids/StrongId.py.j2",
            "Templates/Ids/StrongId",
            "Templates/Ids/.hidden",
        ],
    )
    def test_non_matching_paths(self, path: str) -> None:
        """Wrong case, foreign prefixes and missing extensions are ignored."""
        assert extract_template_name(path) is None


# =============================================================================
# Build
# =============================================================================

class TestBuild:
    """Tests for UserTemplateRegistry.build."""

    def test_indexes_matching_candidates(self) -> None:
        registry = UserTemplateRegistry.build([
            TemplateCandidate("Templates/Ids/StrongId.py.j2", "x"),
            TemplateCandidate("README.md", "ignored"),
        ])

        assert registry.names == ("Ids/StrongId",)
        assert len(registry) == 1

    def test_collision_last_wins_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Two candidates with the same name: the later one is used."""
        with caplog.at_level(logging.WARNING, logger="emitforge.registry"):
            registry = UserTemplateRegistry.build([
                TemplateCandidate("Templates/Ids/StrongId.py.j2", "first"),
                TemplateCandidate("Templates/Ids/StrongId.jinja", "second"),
            ])

        assert registry.get_source("Ids/StrongId") == "second"
        assert registry.get_file_path("Ids/StrongId") == "Templates/Ids/StrongId.jinja"
        assert "Ids/StrongId" in caplog.text

    def test_empty_registry(self) -> None:
        registry = UserTemplateRegistry.empty()
        assert len(registry) == 0
        assert not registry.has_template("Ids/StrongId")


# =============================================================================
# Queries
# =============================================================================

class TestQueries:
    """Tests for registry lookups and rendering."""

    @pytest.fixture
    def registry(self) -> UserTemplateRegistry:
        return UserTemplateRegistry.build([
            TemplateCandidate("Templates/Test/Good.j2", "class {{ type_name }}:\n    pass\n"),
            TemplateCandidate("Templates/Test/Broken.j2", "{% if %}"),
        ])

    def test_has_template(self, registry: UserTemplateRegistry) -> None:
        assert registry.has_template("Test/Good")
        assert "Test/Good" in registry
        assert not registry.has_template("Test/Missing")

    def test_try_render_absent_returns_none(self, registry: UserTemplateRegistry) -> None:
        """Absence is not a failure."""
        assert registry.try_render("Test/Missing", {}) is None

    def test_try_render_success(self, registry: UserTemplateRegistry) -> None:
        result = registry.try_render("Test/Good", {"type_name": "Widget"})
        assert result == RenderSuccess("class Widget:\n    pass\n")

    def test_try_render_failure_is_not_none(self, registry: UserTemplateRegistry) -> None:
        """A registered template always yields a result."""
        result = registry.try_render("Test/Broken", {})
        assert isinstance(result, RenderFailure)

    def test_get_file_path(self, registry: UserTemplateRegistry) -> None:
        assert registry.get_file_path("Test/Good") == "Templates/Test/Good.j2"
        assert registry.get_file_path("Test/Missing") is None


# =============================================================================
# Discovery
# =============================================================================

class TestLoadCandidates:
    """Tests for load_candidates."""

    def test_reads_templates_relative_to_root(self, tmp_path: Path) -> None:
        template = tmp_path / "Templates" / "Ids" / "StrongId.py.j2"
        template.parent.mkdir(parents=True)
        template.write_text("body", encoding="utf-8")
        (tmp_path / "other.txt").write_text("not a template", encoding="utf-8")

        candidates = load_candidates(tmp_path)

        assert candidates == [TemplateCandidate("Templates/Ids/StrongId.py.j2", "body")]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert load_candidates(tmp_path) == []

    def test_skips_binary_files(self, tmp_path: Path) -> None:
        binary = tmp_path / "Templates" / "Ids" / "blob.bin"
        binary.parent.mkdir(parents=True)
        binary.write_bytes(b"\xff\xfe\x00\x80")

        assert load_candidates(tmp_path) == []
