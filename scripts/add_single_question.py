"""
Add one sample question, with its answers, to the record store.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qna.db import StoreError
from qna.dependencies import get_record_store
from qna.seeding import insert_question_with_answers

logger = logging.getLogger(__name__)

NEW_QUESTION = {
    "title": "취약점 분석과 모의 침투 테스트의 차이점은 무엇인가요?",
    "content": (
        "취약점 분석(Vulnerability Assessment)과 모의 침투 테스트(Penetration Testing)는 둘 다 "
        "시스템의 보안을 강화하기 위한 활동이지만, 목표와 접근 방식에 차이가 있습니다. 취약점 "
        "분석은 시스템에 알려진 보안 취약점이 있는지 스캔하고 목록화하는 방어적인 접근입니다. "
        "반면, 모의 침투 테스트는 발견된 취약점을 공격자가 실제로 악용하여 시스템에 침투할 수 "
        "있는지 검증하는 공격적인 접근입니다. 취약점 분석이 넓고 얕게 약점을 찾는다면, 모의 "
        "침투 테스트는 좁고 깊게 특정 공격 경로의 유효성을 검증합니다."
    ),
    "author": "Security Analyst",
    "tags": ["취약점 분석", "모의 침투 테스트", "보안 테스팅"],
    "answers": [
        {
            "author": "주니어 감사인",
            "content": (
                "명확한 설명 감사합니다. 이제 두 용어를 혼용하지 않고 정확하게 보고서에 "
                "기재할 수 있겠어요."
            ),
        },
    ],
}


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    logger.info('Inserting new question: "%s"', NEW_QUESTION["title"])
    try:
        question = insert_question_with_answers(get_record_store(), NEW_QUESTION)
    except StoreError as exc:
        logger.error("Error inserting question: %s", exc)
        return 1
    logger.info("Question %s and its answers were added", question.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
