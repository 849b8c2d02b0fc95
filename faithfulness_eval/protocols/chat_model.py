from typing import Optional, Protocol, Sequence, runtime_checkable

from faithfulness_eval.types.chat import ChatCompletion, ChatInput, ChatMessage


@runtime_checkable
class ChatModel(Protocol):
    """A model handle able to answer chat-style conversations."""

    def create_input(
        self,
        messages: Sequence[ChatMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatInput:
        """
        Builds the request for a single completion from role-tagged messages and sampling options.
        """
        ...

    def invoke(self, chat_input: ChatInput) -> ChatCompletion:
        """
        Sends the request and blocks until the completion is available.

        Raises:
            InvocationError: on any transport, authentication or model-side failure.
        """
        ...


@runtime_checkable
class ModelProvider(Protocol):
    def get_model(self, name: str) -> ChatModel:
        """
        Resolves a model handle by name.

        Raises:
            ModelResolutionError: if nothing is registered under the name or the registered
                model does not support chat completion.
        """
        ...
