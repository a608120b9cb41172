import unittest

from qna.db import InMemoryRecordStore, PostgresRecordStore, StoreError
from qna.query import QuestionFilters, build_list_query

BASE_TIME = 1698364800.0


class PostgresRecordStoreTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres store logic.
    """

    def setUp(self):
        self.db = PostgresRecordStore("sqlite+pysqlite:///:memory:")

    def _insert(self, title, tags=None, offset=0):
        return self.db.insert_question(
            title=title,
            body="<p>본문</p>",
            author="관리자",
            tags=tags,
            created_at=BASE_TIME + offset,
        )

    def test_insert_and_get_question(self):
        question = self._insert("SOC 2 보고서", ["SOC 2", "보고서"])
        fetched = self.db.get_question(question.id)
        self.assertIsNotNone(fetched)
        self.assertEqual(fetched.title, "SOC 2 보고서")
        self.assertEqual(fetched.tags, ["SOC 2", "보고서"])
        self.assertEqual(fetched.answer_count, 0)
        self.assertIsNone(self.db.get_question("missing"))

    def test_select_orders_newest_first_and_applies_range(self):
        for i in range(12):
            self._insert(f"질문 {i}", offset=i)
        page_one = self.db.select_questions(build_list_query("", None, 1, 10).rows)
        page_two = self.db.select_questions(build_list_query("", None, 2, 10).rows)
        self.assertEqual(len(page_one), 10)
        self.assertEqual(page_one[0].title, "질문 11")
        self.assertEqual([q.title for q in page_two], ["질문 1", "질문 0"])
        self.assertEqual(self.db.count_questions(QuestionFilters()), 12)

    def test_ties_broken_by_id_descending(self):
        first = self._insert("a")
        second = self._insert("b")
        rows = self.db.select_questions(build_list_query("", None, 1, 10).rows)
        expected = sorted([first.id, second.id], reverse=True)
        self.assertEqual([q.id for q in rows], expected)

    def test_title_filter_is_case_insensitive(self):
        self._insert("SOC 2 보고서의 Type 1과 Type 2")
        self._insert("COBIT 프레임워크")
        query = build_list_query("soc", None, 1, 10)
        rows = self.db.select_questions(query.rows)
        self.assertEqual([q.title for q in rows], ["SOC 2 보고서의 Type 1과 Type 2"])
        self.assertEqual(self.db.count_questions(query.count), 1)

    def test_title_filter_matches_wildcards_literally(self):
        self._insert("100% coverage")
        self._insert("1000 coverage")
        self._insert("snake_case")
        self._insert("snakeXcase")
        percent = build_list_query("0%", None, 1, 10)
        underscore = build_list_query("e_c", None, 1, 10)
        self.assertEqual(
            [q.title for q in self.db.select_questions(percent.rows)], ["100% coverage"]
        )
        self.assertEqual(
            [q.title for q in self.db.select_questions(underscore.rows)], ["snake_case"]
        )

    def test_tag_filter_is_exact_containment(self):
        self._insert("a", ["보안", "AWS"], offset=1)
        self._insert("b", ["보안 감사"], offset=2)
        self._insert("c", None, offset=3)
        query = build_list_query("", "보안", 1, 10)
        rows = self.db.select_questions(query.rows)
        self.assertEqual([q.title for q in rows], ["a"])
        self.assertEqual(self.db.count_questions(query.count), 1)

    def test_update_question_replaces_tags(self):
        question = self._insert("a", ["old"])
        updated = self.db.update_question(question.id, {"title": "b", "tags": ["new"]})
        self.assertEqual(updated.title, "b")
        self.assertEqual(updated.tags, ["new"])
        old = build_list_query("", "old", 1, 10)
        new = build_list_query("", "new", 1, 10)
        self.assertEqual(self.db.count_questions(old.count), 0)
        self.assertEqual(self.db.count_questions(new.count), 1)
        self.assertIsNone(self.db.update_question("missing", {"title": "x"}))

    def test_update_rejects_unknown_columns(self):
        question = self._insert("a")
        with self.assertRaises(StoreError):
            self.db.update_question(question.id, {"created_at": 0})

    def test_answers(self):
        question = self._insert("a")
        first = self.db.insert_answer(question.id, "사용자1", "좋은 사이트네요.", BASE_TIME)
        self.db.insert_answer(question.id, "사용자2", "감사합니다.", BASE_TIME + 1)
        answers = self.db.list_answers(question.id)
        self.assertEqual([a.author for a in answers], ["사용자1", "사용자2"])
        self.assertEqual(self.db.get_question(question.id).answer_count, 2)

        updated = self.db.update_answer(first.id, {"body": "수정됨"})
        self.assertEqual(updated.body, "수정됨")
        self.assertIsNone(self.db.update_answer("missing", {"body": "x"}))

        self.assertTrue(self.db.delete_answer(first.id))
        self.assertFalse(self.db.delete_answer(first.id))

        with self.assertRaises(StoreError):
            self.db.insert_answer("missing", "x", "y")

    def test_insert_answers_batch(self):
        question = self._insert("a")
        answers = self.db.insert_answers(
            question.id,
            [
                {"author": "개발자", "body": "첫째", "created_at": BASE_TIME},
                {"author": "감사 주니어", "body": "둘째", "created_at": BASE_TIME + 1},
            ],
        )
        self.assertEqual([a.body for a in answers], ["첫째", "둘째"])
        self.assertEqual(len(self.db.list_answers(question.id)), 2)

    def test_insert_answers_batch_is_all_or_nothing(self):
        question = self._insert("a")
        with self.assertRaises(StoreError):
            self.db.insert_answers(
                question.id,
                [{"author": "x", "body": "ok"}, {"author": "y", "text": "bad"}],
            )
        with self.assertRaises(StoreError):
            self.db.insert_answers("missing", [{"author": "x", "body": "ok"}])
        self.assertEqual(self.db.list_answers(question.id), [])

    def test_list_tag_sets_and_delete_all(self):
        question = self._insert("a", ["SOC 2"])
        self._insert("b")
        self.db.insert_answer(question.id, "x", "y")
        self.assertCountEqual(self.db.list_tag_sets(), [["SOC 2"], None])

        self.assertEqual(self.db.delete_all(), (1, 2))
        self.assertEqual(self.db.count_questions(QuestionFilters()), 0)
        self.assertEqual(self.db.list_tag_sets(), [])



class InMemoryRecordStoreTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryRecordStore()
        self.question = self.db.insert_question("a", "", "", None, BASE_TIME)

    def test_insert_answers_batch_is_all_or_nothing(self):
        with self.assertRaises(StoreError):
            self.db.insert_answers(
                self.question.id,
                [{"author": "x", "body": "ok"}, {"author": "y", "body": 3}],
            )
        self.assertEqual(self.db.answers, {})

        self.db.insert_answers(self.question.id, [{"author": "x", "body": "ok"}])
        self.assertEqual(len(self.db.answers), 1)

    def test_returned_answers_are_copies(self):
        answer = self.db.insert_answer(self.question.id, "x", "원본", BASE_TIME)
        listed = self.db.list_answers(self.question.id)[0]
        listed.body = "변경"
        updated = self.db.update_answer(answer.id, {"author": "y"})
        updated.body = "변경"
        answer.body = "변경"
        self.assertEqual(self.db.list_answers(self.question.id)[0].body, "원본")


if __name__ == "__main__":
    unittest.main()
