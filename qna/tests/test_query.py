import unittest

from qna.db import QuestionRecord
from qna.query import QuestionFilters, RowRange, build_list_query, page_range


class BuildListQueryTests(unittest.TestCase):
    def test_no_filters_first_page(self):
        query = build_list_query("", None, 1, 10)
        self.assertIsNone(query.rows.filters.title_contains)
        self.assertIsNone(query.rows.filters.tag)
        self.assertTrue(query.rows.filters.is_empty)
        self.assertEqual(query.rows.row_range, RowRange(start=0, end=9))
        self.assertEqual(query.rows.row_range.limit, 10)

    def test_range_for_later_page(self):
        query = build_list_query("", None, 3, 10)
        self.assertEqual(query.rows.row_range, RowRange(start=20, end=29))

    def test_order_is_newest_first_then_id(self):
        query = build_list_query("", None, 1, 10)
        self.assertEqual(
            [(key.field, key.descending) for key in query.rows.order],
            [("created_at", True), ("id", True)],
        )

    def test_count_query_shares_filters(self):
        query = build_list_query("SOC", "보안", 2, 5)
        self.assertEqual(query.count, query.rows.filters)
        self.assertEqual(query.count.title_contains, "SOC")
        self.assertEqual(query.count.tag, "보안")

    def test_empty_tag_means_all(self):
        query = build_list_query("", "", 1, 10)
        self.assertIsNone(query.rows.filters.tag)

    def test_invalid_page_or_size(self):
        with self.assertRaises(ValueError):
            page_range(0, 10)
        with self.assertRaises(ValueError):
            page_range(1, 0)


class QuestionFiltersTests(unittest.TestCase):
    def _record(self, title, tags=None):
        return QuestionRecord(id="q", title=title, body="", author="", tags=tags)

    def test_title_match_is_case_insensitive(self):
        filters = QuestionFilters(title_contains="soc")
        self.assertTrue(filters.matches(self._record("SOC 2 보고서")))
        self.assertFalse(filters.matches(self._record("COBIT")))

    def test_tag_match_is_exact(self):
        filters = QuestionFilters(tag="보안")
        self.assertTrue(filters.matches(self._record("a", ["보안", "AWS"])))
        self.assertFalse(filters.matches(self._record("a", ["보안 감사"])))
        self.assertFalse(filters.matches(self._record("a", None)))


if __name__ == "__main__":
    unittest.main()
