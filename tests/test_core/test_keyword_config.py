"""Tests for keyword family configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest

from taxonomy.core.keyword_config import (
    DEFAULT_KEYWORD_FAMILIES,
    KeywordConfigError,
    clear_keyword_cache,
    get_keyword_families,
    load_keyword_families,
    normalize_keyword_families,
    parse_keyword_families,
)


@pytest.fixture(autouse=True)
def reset_cache():
    """Clear the keyword cache around each test."""
    clear_keyword_cache()
    yield
    clear_keyword_cache()


class TestNormalize:
    """Tests for normalize_keyword_families."""

    def test_lowercases_and_dedupes(self):
        families = normalize_keyword_families({" Glass ": ["Glass", "PANEL", "glass", " "]})
        assert families == {"glass": ("glass", "panel")}

    def test_merges_families_differing_only_in_case(self):
        families = normalize_keyword_families({"glass": ["panel"], "GLASS": ["glazing"]})
        assert families == {"glass": ("panel", "glazing")}

    def test_rejects_string_keywords(self):
        with pytest.raises(KeywordConfigError):
            normalize_keyword_families({"glass": "panel"})

    def test_rejects_non_string_keyword(self):
        with pytest.raises(KeywordConfigError):
            normalize_keyword_families({"glass": ["panel", 12]})

    def test_rejects_empty_family_name(self):
        with pytest.raises(KeywordConfigError):
            normalize_keyword_families({"": ["panel"]})


class TestParse:
    """Tests for YAML parsing."""

    def test_parse_valid_yaml(self):
        content = """
families:
  glass: [glass, panel]
  hardware:
    - screw
    - Bolt
"""
        families = parse_keyword_families(content)
        assert families == {"glass": ("glass", "panel"), "hardware": ("screw", "bolt")}

    def test_missing_families_key(self):
        with pytest.raises(KeywordConfigError, match="families"):
            parse_keyword_families("glass: [panel]")

    def test_invalid_yaml(self):
        with pytest.raises(KeywordConfigError):
            parse_keyword_families("families: [unclosed")

    def test_load_from_file(self, tmp_path: Path):
        path = tmp_path / "keywords.yaml"
        path.write_text("families:\n  shower: [screen]\n", encoding="utf-8")

        assert load_keyword_families(path) == {"shower": ("screen",)}

    def test_shipped_file_matches_defaults(self):
        path = Path(__file__).parents[2] / "config" / "keyword_families.yaml"
        assert load_keyword_families(path) == DEFAULT_KEYWORD_FAMILIES


class TestGetKeywordFamilies:
    """Tests for the configured keyword table."""

    def test_defaults_without_path(self):
        with patch("taxonomy.core.keyword_config.settings") as mock_settings:
            mock_settings.keyword_families_path = None
            assert get_keyword_families() == DEFAULT_KEYWORD_FAMILIES

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path):
        with patch("taxonomy.core.keyword_config.settings") as mock_settings:
            mock_settings.keyword_families_path = str(tmp_path / "missing.yaml")
            assert get_keyword_families() == DEFAULT_KEYWORD_FAMILIES

    def test_configured_file_is_loaded(self, tmp_path: Path):
        path = tmp_path / "keywords.yaml"
        path.write_text("families:\n  pool: [spigot]\n", encoding="utf-8")

        with patch("taxonomy.core.keyword_config.settings") as mock_settings:
            mock_settings.keyword_families_path = str(path)
            assert get_keyword_families() == {"pool": ("spigot",)}

    def test_malformed_configured_file_raises(self, tmp_path: Path):
        path = tmp_path / "keywords.yaml"
        path.write_text("families: nope\n", encoding="utf-8")

        with patch("taxonomy.core.keyword_config.settings") as mock_settings:
            mock_settings.keyword_families_path = str(path)
            with pytest.raises(KeywordConfigError):
                get_keyword_families()
