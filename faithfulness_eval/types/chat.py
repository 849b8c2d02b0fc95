from typing import Literal, Optional

from pydantic import BaseModel

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)


class ChatInput(BaseModel):
    """
    A single chat completion request: the ordered conversation plus sampling options.
    Options left as None are not sent, so the backend default applies.
    """

    messages: list[ChatMessage]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def to_openai_messages(self) -> list[dict]:
        return [message.model_dump() for message in self.messages]


class ChatChoice(BaseModel):
    message: ChatMessage


class ChatCompletion(BaseModel):
    choices: list[ChatChoice]

    @property
    def first_content(self) -> Optional[str]:
        if len(self.choices) == 0:
            return None
        return self.choices[0].message.content
