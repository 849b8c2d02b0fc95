"""Shared fixtures: a scripted chat model standing in for the judge endpoint."""

import pytest

from faithfulness_eval.llm.model_registry import ModelRegistry
from faithfulness_eval.prompt_eval.faithfulness_evaluator import (
    FaithfulnessEvaluator,
    FaithfulnessEvaluatorConfig,
)
from faithfulness_eval.types.chat import (
    ChatChoice,
    ChatCompletion,
    ChatInput,
    ChatMessage,
)

WELL_FORMED_REPLY = "<feedback>\nGood answer.\n</feedback>\n<score>\n4\n</score>"


class ScriptedChatModel:
    """Returns canned replies in order and records every request it receives."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.inputs: list[ChatInput] = []

    def create_input(self, messages, temperature=None, max_tokens=None) -> ChatInput:
        return ChatInput(
            messages=list(messages), temperature=temperature, max_tokens=max_tokens
        )

    def invoke(self, chat_input: ChatInput) -> ChatCompletion:
        self.inputs.append(chat_input)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            return ChatCompletion(choices=[])
        return ChatCompletion(
            choices=[ChatChoice(message=ChatMessage(role="assistant", content=reply))]
        )


@pytest.fixture
def make_evaluator():
    """Factory building an evaluator whose "evaluator" model replies with the given texts."""

    def _make(*replies):
        model = ScriptedChatModel(*replies)
        registry = ModelRegistry({"evaluator": model})
        return FaithfulnessEvaluator(FaithfulnessEvaluatorConfig(models=registry)), model

    return _make


@pytest.fixture
def scripted_model():
    return ScriptedChatModel(WELL_FORMED_REPLY)


ENDPOINT_VARIABLES = (
    "EVALUATOR_MODEL_NAME",
    "EVALUATOR_MODEL",
    "EVALUATOR_API_KEY",
    "EVALUATOR_BASE_URL",
    "EVALUATOR_TIMEOUT",
    "OPENAI_API_KEY",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Removes every evaluator endpoint variable; values loaded from .env files are undone too."""
    for key in ENDPOINT_VARIABLES:
        # setenv first so teardown also removes variables that were absent to begin with
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch
