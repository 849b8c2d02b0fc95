"""Tests for the OpenAI-compatible chat model, with the SDK client patched out."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
from openai import OpenAIError

from faithfulness_eval.errors import InvocationError
from faithfulness_eval.llm.open_ai_compliant_chat_model import (
    OpenAICompliantChatModel,
)
from faithfulness_eval.protocols.chat_model import ChatModel
from faithfulness_eval.types.chat import ChatCompletion, ChatMessage


def _openai_response(*contents):
    return SimpleNamespace(
        choices=[
            SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))
            for content in contents
        ]
    )


@pytest.fixture
def openai_client():
    with patch(
        "faithfulness_eval.llm.open_ai_compliant_chat_model.OpenAI"
    ) as openai_cls:
        yield openai_cls.return_value


@pytest.fixture
def chat_model(openai_client):
    return OpenAICompliantChatModel(
        base_url="http://localhost:8000/v1", api_key="key", model="judge-model"
    )


MESSAGES = [ChatMessage.system("You are a helpful assistant."), ChatMessage.user("Rate this.")]


class TestOpenAICompliantChatModel:
    def test_implements_chat_model(self, chat_model):
        assert issubclass(OpenAICompliantChatModel, ChatModel)
        assert isinstance(chat_model, ChatModel)

    def test_client_is_created_without_retries(self):
        with patch(
            "faithfulness_eval.llm.open_ai_compliant_chat_model.OpenAI"
        ) as openai_cls:
            OpenAICompliantChatModel(base_url=None, api_key="key", model="m")
        openai_cls.assert_called_once_with(base_url=None, api_key="key", max_retries=0)

    def test_create_input_keeps_message_order_and_options(self, chat_model):
        chat_input = chat_model.create_input(MESSAGES, temperature=0.5, max_tokens=500)
        assert chat_input.messages == MESSAGES
        assert chat_input.temperature == 0.5
        assert chat_input.max_tokens == 500

    def test_invoke_sends_request(self, chat_model, openai_client):
        openai_client.chat.completions.create.return_value = _openai_response("reply")
        chat_input = chat_model.create_input(MESSAGES, temperature=0.5, max_tokens=500)

        chat_model.invoke(chat_input)

        openai_client.chat.completions.create.assert_called_once_with(
            model="judge-model",
            messages=[
                {"role": "system", "content": "You are a helpful assistant."},
                {"role": "user", "content": "Rate this."},
            ],
            temperature=0.5,
            max_tokens=500,
        )

    def test_unset_options_are_not_sent(self, chat_model, openai_client):
        openai_client.chat.completions.create.return_value = _openai_response("reply")
        chat_model.invoke(chat_model.create_input(MESSAGES))

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert "temperature" not in kwargs
        assert "max_tokens" not in kwargs

    def test_response_is_converted(self, chat_model, openai_client):
        openai_client.chat.completions.create.return_value = _openai_response("first", None)

        completion = chat_model.invoke(chat_model.create_input(MESSAGES))

        assert isinstance(completion, ChatCompletion)
        assert [c.message.content for c in completion.choices] == ["first", ""]
        assert completion.first_content == "first"

    def test_sdk_errors_become_invocation_errors(self, chat_model, openai_client):
        sdk_error = OpenAIError("invalid api key")
        openai_client.chat.completions.create.side_effect = sdk_error

        with pytest.raises(InvocationError, match="invalid api key") as exc_info:
            chat_model.invoke(chat_model.create_input(MESSAGES))

        assert exc_info.value.__cause__ is sdk_error
        assert openai_client.chat.completions.create.call_count == 1
