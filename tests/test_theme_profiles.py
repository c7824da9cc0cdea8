"""Tests for theme profile resolution and validation."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from reportlab.lib import colors

from bombona_reports.config import Theme
from bombona_reports.theme_profiles import THEME_PROFILES, ThemeProfile, resolve_theme


class ThemeProfileTests(unittest.TestCase):
    def test_builtin_theme_profiles(self) -> None:
        self.assertEqual(sorted(THEME_PROFILES), ["corporate-blue", "default"])

    def test_default_profile_matches_builtin_theme(self) -> None:
        theme = resolve_theme()
        for name in ("PRIMARY", "HIGHLIGHT", "INACTIVE", "BACKGROUND_CARD", "ERROR", "WHITE"):
            with self.subTest(name=name):
                self.assertEqual(getattr(theme, name).rgb(), getattr(Theme, name).rgb())
        self.assertEqual(theme.FONT_BOLD, Theme.FONT_BOLD)
        self.assertEqual(theme.FONT_ICON, "ZapfDingbats")

    def test_corporate_blue_profile(self) -> None:
        theme = resolve_theme(profile="corporate-blue")
        self.assertEqual(theme.PRIMARY.rgb(), colors.HexColor("#3B82F6").rgb())
        self.assertEqual(theme.SUCCESS.rgb(), colors.HexColor("#10B981").rgb())
        self.assertEqual(theme.ACCENT.rgb(), colors.HexColor("#8B5CF6").rgb())

    def test_unknown_profile_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown theme profile 'neon'"):
            resolve_theme(profile="neon")

    def test_resolve_theme_applies_json_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            theme_path = Path(tmp_dir) / "theme.json"
            theme_path.write_text(
                json.dumps({"primary": "#112233", "font_bold": "Courier-Bold"}),
                encoding="utf-8",
            )

            theme = resolve_theme(theme_file=theme_path)
            self.assertEqual(theme.PRIMARY.rgb(), colors.HexColor("#112233").rgb())
            self.assertEqual(theme.FONT_BOLD, "Courier-Bold")
            self.assertEqual(theme.INFO.rgb(), Theme.INFO.rgb())

    def test_resolve_theme_rejects_unknown_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            theme_path = Path(tmp_dir) / "theme.json"
            theme_path.write_text(json.dumps({"unknown": "#111111"}), encoding="utf-8")

            with self.assertRaisesRegex(ValueError, "unknown theme key\\(s\\): unknown"):
                resolve_theme(theme_file=theme_path)

    def test_resolve_theme_rejects_invalid_color(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            theme_path = Path(tmp_dir) / "theme.json"
            theme_path.write_text(json.dumps({"accent": "invalid-color"}), encoding="utf-8")

            with self.assertRaisesRegex(ValueError, "invalid color value 'invalid-color'"):
                resolve_theme(theme_file=theme_path)

    def test_resolve_theme_rejects_missing_file(self) -> None:
        with self.assertRaisesRegex(ValueError, "does not exist"):
            resolve_theme(theme_file="/nonexistent/theme.json")

    def test_resolve_theme_rejects_non_object_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            theme_path = Path(tmp_dir) / "theme.json"
            theme_path.write_text(json.dumps(["#111111"]), encoding="utf-8")

            with self.assertRaisesRegex(ValueError, "must contain a JSON object"):
                resolve_theme(theme_file=theme_path)


class ThemeOverrideTests(unittest.TestCase):
    def test_overrides_return_a_new_profile(self) -> None:
        base = ThemeProfile()
        updated = base.with_overrides({"error": "#000000"})

        self.assertEqual(updated.error, "#000000")
        self.assertEqual(base.error, "#F44336")
        self.assertEqual(updated.primary, base.primary)

    def test_every_field_becomes_a_theme_attribute(self) -> None:
        theme = ThemeProfile().to_theme_class()
        for key in ThemeProfile.keys():
            with self.subTest(key=key):
                self.assertTrue(hasattr(theme, key.upper()))

    def test_empty_font_name_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "'font_bold' must be a non-empty font name string"):
            ThemeProfile().with_overrides({"font_bold": " "})

    def test_non_string_color_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "'primary' must be a non-empty color string"):
            ThemeProfile().with_overrides({"primary": 123})


if __name__ == "__main__":
    unittest.main()
