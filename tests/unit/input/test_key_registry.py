"""Tests for key-table dispatch."""

from __future__ import annotations

import unittest

from wswizard.input import KeyComboBinding, KeyComboRegistry


class KeyComboRegistryTests(unittest.TestCase):
    def test_every_combo_reaches_the_handler(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register(("UP", "k"), lambda: calls.append("up") or True)

        self.assertTrue(registry.dispatch("UP"))
        self.assertTrue(registry.dispatch("k"))
        self.assertEqual(calls, ["up", "up"])

    def test_unbound_key_returns_none(self) -> None:
        self.assertIsNone(KeyComboRegistry().dispatch("x"))

    def test_later_binding_replaces_earlier(self) -> None:
        registry = (
            KeyComboRegistry()
            .register_binding(KeyComboBinding(("q",), lambda: False))
            .register_binding(KeyComboBinding(("q",), lambda: True))
        )
        self.assertTrue(registry.dispatch("q"))

    def test_text_fallback_takes_unbound_printable_characters(self) -> None:
        typed: list[str] = []
        registry = KeyComboRegistry(on_text=lambda ch: typed.append(ch) or True).register(
            ("ESC",), lambda: True
        )

        self.assertTrue(registry.dispatch("a"))
        self.assertTrue(registry.dispatch("é"))
        self.assertIsNone(registry.dispatch("CTRL_X"))
        self.assertIsNone(registry.dispatch("\x07"))
        self.assertTrue(registry.dispatch("ESC"))
        self.assertEqual(typed, ["a", "é"])


if __name__ == "__main__":
    unittest.main()
