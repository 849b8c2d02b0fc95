import logging
import re
from typing import Optional

from pydantic import BaseModel

from faithfulness_eval.config import MAX_TOKENS, MODEL_NAME, TEMPERATURE
from faithfulness_eval.errors import FormatError, InvocationError, ParseError
from faithfulness_eval.llm.model_registry import ModelRegistry
from faithfulness_eval.protocols.chat_model import ModelProvider
from faithfulness_eval.types.chat import ChatMessage
from faithfulness_eval.types.evaluation import Evaluation
from faithfulness_eval.utils.text import log_snippet

SYSTEM_PROMPT = "You are a helpful assistant."

# adapted from the flow-judge prompt formatter (flowaicom/flow-judge)
EVALUATION_PROMPT = """
# GOAL
Your job is to evaluate a task carried out by an AI system powered by a large
language model.

You will be provided with the inputs and output of the task, as well as the evaluation criteria
and scoring rubric. Your task is to evaluate the output of the AI system based on the evaluation
criteria and scoring rubric provided.

# INPUT
Below are the inputs required for performing the task:
<inputs>
{input}
</inputs>

# OUTPUT
Below is the output of the task:
<output>
{output}
</output>

# EVALUATION CRITERIA AND SCORING RUBRIC
Here are the evaluation criteria and the rubric that you need to use for evaluating the task:
<evaluation_criteria>
Based on the given context, evaluate how consistent and faithful the generated response is to the
context. The response should not contain any hallucinated or fabricated information that is not
supported by the context.
</evaluation_criteria>

<scoring_rubric>
- Score: 1: The response is completely inconsistent with the provided context. It contains significant amount
of hallucinated or fabricated information that directly contradicts or is not supported at all by
the context
- Score: 2: The response is mostly inconsistent with the provided context. While it may contain some
information from the context, it introduces a substantial amount of hallucinated or fabricated
details that deviate from the context
- Score: 3: The response is somewhat consistent with the provided context. It includes a mix of information
from the context and some hallucinated or fabricated details. The fabrications are minor and do
not significantly contradict the context
- Score: 4: The response is mostly consistent with the provided context. The vast majority of the content is
supported by the context, with only minor and inconsequential inconsistencies or fabrications, if
any
- Score: 5: The response is completely consistent with and faithful to the provided context. All details in
the response are directly supported by the context, without any hallucinated or fabricated
information
</scoring_rubric>

# INSTRUCTIONS FOR THE EVALUATION
1. Understand the task and criteria: Familiarize yourself with the task to be evaluated.
Review the evaluation criteria and scoring rubric to understand the different levels of
performance and the descriptions for each score.
2. Review the inputs and output: Look at the inputs provided for the task. Examine the output
generated from completing the task.
3. Compare output to score descriptions: Compare the output against the criteria and score
descriptions in the scoring rubric. For each criterion,decide which description best matches the
output.
4. After comparing the output to the score descriptions, pay attention to the small details that
might impact the final score that you assign. Sometimes a small difference can dictate the final
score.
5. Write verbal feedback justifying your evaluation that includes a detailed rationale, referring
to specific aspects of the output and comparing them to the rubric.
6. Assign a final score based on the scoring rubric.

## FORMAT FOR THE EVALUATION
- Write the verbal feedback inside <feedback> tags without any additional surrounding text.
- Write the numeric score inside <score> tags, without any additional surrounding text and always
after the feedback.

Please accurately evaluate the task. Strictly adhere to the evaluation criteria and rubric.
"""

FEEDBACK_OPEN = "<feedback>\n"
FEEDBACK_CLOSE = "\n</feedback>"
SCORE_OPEN = "<score>\n"
SCORE_CLOSE = "\n</score>"

# same grammar as a strict base-10 atoi: optional sign, ascii digits, nothing else
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
SCORE_MIN = -(2**63)
SCORE_MAX = 2**63 - 1

logger = logging.getLogger(__name__)


def render_prompt(input: str, output: str, template: str = EVALUATION_PROMPT) -> str:
    """
    Places the task input and output into the template verbatim. Nothing is escaped, so text
    that imitates the template's own tags ends up in the prompt as-is.
    """
    return template.format(input=input, output=output)


def _extract_between(text: str, opening: str, closing: str) -> str:
    start = text.find(opening)
    end = text.find(closing)
    if start == -1 or end == -1:
        raise FormatError("invalid response format")

    start += len(opening)
    if end < start:
        # the closing marker overlaps the opening one, e.g. "<feedback>\n</feedback>"
        raise FormatError("invalid response format")

    return text[start:end]


def _parse_score(raw_score: str) -> int:
    try:
        if INTEGER_PATTERN.fullmatch(raw_score) is None:
            raise ValueError(f"invalid literal for base-10 integer: {raw_score!r}")
        score = int(raw_score)
        if not SCORE_MIN <= score <= SCORE_MAX:
            raise ValueError(f"value out of 64-bit integer range: {raw_score!r}")
        return score
    except ValueError as e:
        raise ParseError(f"could not parse score {raw_score!r}: {e}") from e


def parse_evaluation(text: Optional[str]) -> Evaluation:
    """Extracts the feedback and integer score from a judge reply.

    The reply is stripped, then the first occurrence of each marker is located. Order between
    the feedback and score blocks is not checked.

    Parameters:
        text: Raw reply of the judge model. None is treated as an empty reply.

    Returns:
        Evaluation: score and verbatim feedback text.

    Raises:
        FormatError: if a marker is missing.
        ParseError: if the score block is not a base-10 integer.
    """

    reply = (text or "").strip()

    for marker in (FEEDBACK_OPEN, FEEDBACK_CLOSE, SCORE_OPEN, SCORE_CLOSE):
        if marker not in reply:
            logger.warning(
                f"Marker {marker!r} missing from judge reply: {log_snippet(reply)}"
            )
            raise FormatError("invalid response format")

    reasoning = _extract_between(reply, FEEDBACK_OPEN, FEEDBACK_CLOSE)
    raw_score = _extract_between(reply, SCORE_OPEN, SCORE_CLOSE)

    try:
        score = _parse_score(raw_score)
    except ParseError:
        logger.warning(f"Non-integer score in judge reply: {log_snippet(raw_score)}")
        raise

    return Evaluation(score=score, reasoning=reasoning)


class FaithfulnessEvaluatorConfig(BaseModel):
    models: ModelProvider
    model_name: str = MODEL_NAME
    temperature: float = TEMPERATURE
    max_tokens: int = MAX_TOKENS
    system_prompt: str = SYSTEM_PROMPT
    evaluation_prompt: str = EVALUATION_PROMPT

    class Config:
        arbitrary_types_allowed = True
        frozen = True
        protected_namespaces = ()


class FaithfulnessEvaluator:
    """Asks a judge model how faithful a task output is to its input context, on a 1-5 scale.

    The rubric range is a convention of the prompt; scores outside it are returned unchanged.
    Every failure is raised to the caller, nothing is retried or replaced by a default score.
    """

    def __init__(self, config: FaithfulnessEvaluatorConfig):
        self.config = config

    def score_response(self, input: str, output: str) -> Evaluation:
        model = self.config.models.get_model(self.config.model_name)

        chat_input = model.create_input(
            [
                ChatMessage.system(self.config.system_prompt),
                ChatMessage.user(
                    render_prompt(input, output, self.config.evaluation_prompt)
                ),
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

        completion = model.invoke(chat_input)
        if len(completion.choices) == 0:
            raise InvocationError(
                f"Model {self.config.model_name} returned no completion choices"
            )

        evaluation = parse_evaluation(completion.first_content)
        logger.debug(f"Judge verdict: {evaluation!r}")
        return evaluation

    def __call__(self, input: str, output: str) -> Evaluation:
        return self.score_response(input, output)


def score_response(
    input: str,
    output: str,
    models: Optional[ModelProvider] = None,
) -> Evaluation:
    """
    Scores `output` against `input` with the model registered as "evaluator". Without an
    explicit provider, the model endpoint is read from the environment (see config.py).
    """

    if models is None:
        models = ModelRegistry.from_env()

    evaluator = FaithfulnessEvaluator(FaithfulnessEvaluatorConfig(models=models))
    return evaluator.score_response(input, output)
