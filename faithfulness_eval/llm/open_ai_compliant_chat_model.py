import logging
from typing import Optional, Sequence

from openai import OpenAI, OpenAIError

from faithfulness_eval.errors import InvocationError
from faithfulness_eval.protocols.chat_model import ChatModel
from faithfulness_eval.types.chat import (
    ChatChoice,
    ChatCompletion,
    ChatInput,
    ChatMessage,
)
from faithfulness_eval.utils.text import log_snippet

logger = logging.getLogger(__name__)


class OpenAICompliantChatModel(ChatModel):
    """Chat model served by any OpenAI-type endpoint. Requests are sent synchronously."""

    def __init__(
        self,
        base_url: Optional[str],
        api_key: str,
        model: str,
        max_retries: int = 0,
        timeout: Optional[float] = None,
    ):
        client_kwargs = {
            "base_url": base_url,
            "api_key": api_key,
            "max_retries": max_retries,
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout

        self.client = OpenAI(**client_kwargs)
        self.model = model

    def __repr__(self) -> str:
        return f"OpenAICompliantChatModel(model='{self.model}', base_url='{self.client.base_url}')"

    def create_input(
        self,
        messages: Sequence[ChatMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatInput:
        return ChatInput(
            messages=list(messages), temperature=temperature, max_tokens=max_tokens
        )

    def invoke(self, chat_input: ChatInput) -> ChatCompletion:
        request = {
            "model": self.model,
            "messages": chat_input.to_openai_messages(),
        }
        if chat_input.temperature is not None:
            request["temperature"] = chat_input.temperature
        if chat_input.max_tokens is not None:
            request["max_tokens"] = chat_input.max_tokens

        last_message = request["messages"][-1]["content"]
        logger.info(
            f"Requesting completion from {self.model}: {log_snippet(last_message, 100)}"
        )

        try:
            response = self.client.chat.completions.create(**request)
        except OpenAIError as e:
            logger.error(f"LLM call error for model {self.model}: {e}")
            raise InvocationError(f"Model {self.model} invocation failed: {e}") from e

        return ChatCompletion(
            choices=[
                ChatChoice(
                    message=ChatMessage(
                        role=choice.message.role,
                        content=choice.message.content or "",
                    )
                )
                for choice in response.choices
            ]
        )
