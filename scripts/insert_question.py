"""
Insert a single question from the command line.

Example:
    python scripts/insert_question.py "새로운 질문 제목" "새로운 질문 내용" "새로운 작성자" --tags "SOC 2,보안"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qna.db import StoreError
from qna.dependencies import get_record_store
from qna.tags import parse_tags

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Insert one question")
    parser.add_argument("title", help="Question title")
    parser.add_argument("content", help="Question body")
    parser.add_argument("author", help="Author name")
    parser.add_argument(
        "--tags",
        type=str,
        default="",
        help="Comma separated tags",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    if not args.title.strip():
        logger.error("Title must not be empty")
        return 1

    try:
        record = get_record_store().insert_question(
            title=args.title.strip(),
            body=args.content,
            author=args.author,
            tags=parse_tags(args.tags),
        )
    except StoreError as exc:
        logger.error("Error inserting data: %s", exc)
        return 1

    logger.info("Data inserted successfully: %s", record.as_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
