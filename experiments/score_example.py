import logging

from dotenv import load_dotenv

from faithfulness_eval.errors import EvaluationError
from faithfulness_eval.llm.model_registry import ModelRegistry
from faithfulness_eval.prompt_eval.faithfulness_evaluator import (
    FaithfulnessEvaluator,
    FaithfulnessEvaluatorConfig,
)

loaded = load_dotenv(override=True)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger()

samples = [
    (
        "The Eiffel Tower was completed in 1889 and is 330 metres tall.",
        "The Eiffel Tower, finished in 1889, stands about 330 metres high.",
    ),
    (
        "The Eiffel Tower was completed in 1889 and is 330 metres tall.",
        "The Eiffel Tower was built in 1925 by Gustave Eiffel's grandson.",
    ),
]


def main():
    evaluator = FaithfulnessEvaluator(
        FaithfulnessEvaluatorConfig(models=ModelRegistry.from_env())
    )

    for context, answer in samples:
        try:
            evaluation = evaluator.score_response(context, answer)
        except EvaluationError as e:
            logger.error(f"Evaluation failed ({type(e).__name__}): {e}")
            continue

        print(f"{evaluation.score}/5  {answer}")
        print(f"    {evaluation.reasoning}")


if __name__ == "__main__":
    main()
