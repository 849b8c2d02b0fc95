from pydantic import BaseModel

from faithfulness_eval.utils.text import log_snippet


class Evaluation(BaseModel):
    """Verdict of the judge model: a rubric score and the feedback justifying it."""

    score: int
    reasoning: str

    def __repr__(self) -> str:
        return f"Evaluation(score={self.score}, reasoning='{log_snippet(self.reasoning, 150)}')"

    class Config:
        frozen = True
