import unittest

from qna.pagination import page_count, present_pagination


class PaginationTests(unittest.TestCase):
    def test_page_count(self):
        self.assertEqual(page_count(0, 10), 0)
        self.assertEqual(page_count(1, 10), 1)
        self.assertEqual(page_count(10, 10), 1)
        self.assertEqual(page_count(11, 10), 2)
        self.assertEqual(page_count(12, 10), 2)
        self.assertEqual(page_count(21, 10), 3)

    def test_hidden_when_single_page(self):
        view = present_pagination(10, 10, 1)
        self.assertFalse(view.visible)
        self.assertEqual(view.page_count, 1)
        self.assertFalse(view.previous_enabled)
        self.assertFalse(view.next_enabled)

    def test_empty_result(self):
        view = present_pagination(0, 10, 1)
        self.assertFalse(view.visible)
        self.assertEqual(view.page_count, 0)
        self.assertEqual(view.pages, [])
        self.assertFalse(view.next_enabled)

    def test_every_page_enumerated(self):
        view = present_pagination(95, 10, 4)
        self.assertTrue(view.visible)
        self.assertEqual(view.pages, list(range(1, 11)))
        self.assertTrue(view.previous_enabled)
        self.assertTrue(view.next_enabled)

    def test_last_page_disables_next(self):
        view = present_pagination(12, 10, 2)
        self.assertTrue(view.previous_enabled)
        self.assertFalse(view.next_enabled)
        self.assertEqual(view.as_dict()["pages"], [1, 2])


if __name__ == "__main__":
    unittest.main()
