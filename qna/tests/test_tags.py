import unittest
from unittest.mock import MagicMock

from qna.tags import TagIndex, build_tag_universe, normalize_tags, parse_tags


class TagUniverseTests(unittest.TestCase):
    def test_flattens_and_deduplicates(self):
        tags = build_tag_universe([["SOC 2", "보안"], None, ["보안", "AWS"], []])
        self.assertEqual(tags, ["SOC 2", "보안", "AWS"])

    def test_empty(self):
        self.assertEqual(build_tag_universe([]), [])

    def test_parse_and_normalize(self):
        self.assertEqual(parse_tags(" SOC 2, 보안 ,, 보안"), ["SOC 2", "보안"])
        self.assertEqual(parse_tags(None), [])
        self.assertEqual(normalize_tags(["a", " ", "a ", "b"]), ["a", "b"])


class TagIndexTests(unittest.TestCase):
    def test_loads_once_until_invalidated(self):
        store = MagicMock()
        store.list_tag_sets.return_value = [["a"], ["b", "a"]]
        index = TagIndex(store)
        self.assertFalse(index.loaded)

        self.assertEqual(index.load(), ["a", "b"])
        store.list_tag_sets.return_value = [["c"]]
        self.assertEqual(index.load(), ["a", "b"])
        self.assertEqual(store.list_tag_sets.call_count, 1)

        index.invalidate()
        self.assertEqual(index.load(), ["c"])
        self.assertEqual(store.list_tag_sets.call_count, 2)


if __name__ == "__main__":
    unittest.main()
