"""
Browse the question list from the terminal using the list controller.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qna.config import get_settings
from qna.controller import ListController, ListStatus
from qna.dependencies import get_record_store

logger = logging.getLogger(__name__)


def render(controller: ListController) -> str:
    state = controller.state
    lines = []
    if state.tags:
        lines.append("Tags: " + " | ".join(state.tags))
    if state.status == ListStatus.FAILED:
        lines.append(f"Error: {state.error}")
        return "\n".join(lines)
    if not state.rows:
        lines.append("No questions found.")
    for row in state.rows:
        lines.append(row.title)
        lines.append(
            f"  작성자: {row.author} | 작성일: {row.created_at} | 답변: {row.answer_count}"
        )
    pagination = controller.pagination
    if pagination.visible:
        pages = " ".join(
            f"[{p}]" if p == pagination.current_page else str(p)
            for p in pagination.pages
        )
        prev_label = "<" if pagination.previous_enabled else " "
        next_label = ">" if pagination.next_enabled else " "
        lines.append(f"{prev_label} {pages} {next_label}")
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Browse questions")
    parser.add_argument("-s", "--search", type=str, default="", help="Title search")
    parser.add_argument("-t", "--tag", type=str, default=None, help="Tag filter")
    parser.add_argument("-p", "--page", type=int, default=1, help="Page number")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s:%(message)s")

    settings = get_settings()
    controller = ListController(
        get_record_store(),
        page_size=settings.page_size,
        date_format=settings.date_format,
    )
    controller.mount()
    controller.select_tag(args.tag)
    controller.set_search_term(args.search)
    if args.page > 1:
        controller.go_to_page(args.page)

    print(render(controller))
    return 1 if controller.state.status == ListStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
