"""Tests for the layout plan."""

import pytest
from pydantic import ValidationError

from site_reorg.organization.layout import (
    DEFAULT_LAYOUT,
    Relocation,
    SiteLayout,
    canonical_url,
)


class TestCanonicalUrl:
    """Test canonical URL derivation."""

    @pytest.mark.parametrize(
        "destination,expected",
        [
            ("guide/index.html", "/guide/"),
            ("sessions/2025/10/index.html", "/sessions/2025/10/"),
            ("index.html", "/"),
            ("downloads/slides.pdf", "/downloads/slides.pdf"),
        ],
    )
    def test_canonical_url(self, destination, expected):
        """Test index documents map to directory URLs."""
        assert canonical_url(destination) == expected

    def test_custom_index_name(self):
        """Test the index document name is respected."""
        assert canonical_url("guide/index.htm", index_name="index.htm") == "/guide/"
        assert canonical_url("guide/index.html", index_name="index.htm") == (
            "/guide/index.html"
        )


class TestDefaultLayout:
    """Test the journal club layout."""

    def test_flatten_directories_before_files(self):
        """Test directories are listed before files."""
        entries = DEFAULT_LAYOUT.flatten_entries

        assert entries[:5] == ["css", "js", "img", "downloads", "JC"]
        assert "jc_guide.html" in entries

    def test_relocation_targets(self):
        """Test every relocation maps to its semantic location."""
        targets = {r.source: r.target() for r in DEFAULT_LAYOUT.relocations}

        assert targets == {
            "jc_guide.html": "/guide/",
            "JC-2025-10-14.html": "/sessions/2025/10/",
            "JC-JAN-2026.html": "/sessions/2026/01/",
            "summary-2025.html": "/summaries/2025/",
        }

    def test_october_alias(self):
        """Test the alternate October page redirects to the same session."""
        october = next(
            r for r in DEFAULT_LAYOUT.relocations if r.source == "JC-2025-10-14.html"
        )

        assert october.aliases == ["jc-october-2025.html"]
        assert october.legacy_paths == ["JC-2025-10-14.html", "jc-october-2025.html"]

    def test_assets_fan_out(self):
        """Test css, js and img move under assets/."""
        moves = {m.source: m.destination for m in DEFAULT_LAYOUT.asset_moves}

        assert moves == {
            "css": "assets/css",
            "js": "assets/js",
            "img": "assets/img",
        }


class TestSiteLayoutValidation:
    """Test layout validation."""

    def test_duplicate_legacy_path_rejected(self):
        """Test two relocations cannot claim the same legacy page."""
        with pytest.raises(ValidationError, match="claimed by both"):
            SiteLayout(
                relocations=[
                    Relocation(source="a.html", destination="one/index.html"),
                    Relocation(
                        source="b.html",
                        destination="two/index.html",
                        aliases=["a.html"],
                    ),
                ]
            )

    def test_empty_layout_is_valid(self):
        """Test a layout may plan nothing."""
        layout = SiteLayout()

        assert layout.flatten_entries == []
        assert layout.relocations == []
