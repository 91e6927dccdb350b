"""Answer form routes: view a pending question, submit its answer."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from notifier.ask.page import build_answer_page
from notifier.ask.registry import QuestionRegistry
from notifier.exceptions import AnswerMissing
from notifier.schemas.ask import AnswerAccepted, AnswerSubmit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ask"])


def get_registry(request: Request) -> QuestionRegistry:
    return request.app.state.registry


@router.post(
    "/api/answer/{question_id}",
    response_model=AnswerAccepted,
    summary="Submit the answer to a pending question",
)
async def submit_answer(
    question_id: str,
    body: Optional[AnswerSubmit] = None,
    registry: QuestionRegistry = Depends(get_registry),
):
    if body is None or not body.answer or not body.answer.strip():
        raise AnswerMissing()
    # Raises AnswerNotFound (404) when the question is gone
    registry.answer(question_id, body.answer)
    return AnswerAccepted()


@router.get("/{question_id}", response_class=HTMLResponse, summary="Answer form for a question")
async def view_question(question_id: str, registry: QuestionRegistry = Depends(get_registry)):
    pending = registry.get(question_id)
    if pending is None:
        return PlainTextResponse("Question not found or has expired.", status_code=404)
    return HTMLResponse(build_answer_page(pending))
