from typing import Optional

from pydantic import BaseModel, Field


class AnswerSubmit(BaseModel):
    # Optional so a missing answer is reported as 400, not as a validation error
    answer: Optional[str] = Field(None, description="Free-text answer to the pending question")


class AnswerAccepted(BaseModel):
    message: str = "Answer submitted successfully"
