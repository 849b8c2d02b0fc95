import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional

from faithfulness_eval.config import ModelConfig, load_model_config
from faithfulness_eval.errors import ModelResolutionError
from faithfulness_eval.llm.open_ai_compliant_chat_model import (
    OpenAICompliantChatModel,
)
from faithfulness_eval.protocols.chat_model import ChatModel, ModelProvider

logger = logging.getLogger(__name__)


class ModelRegistry(ModelProvider):
    """Read-only mapping from model names to model handles."""

    def __init__(self, models: Mapping[str, Any]):
        self._models = MappingProxyType(dict(models))

    @classmethod
    def from_config(cls, config: ModelConfig) -> "ModelRegistry":
        model = OpenAICompliantChatModel(
            base_url=config.base_url,
            api_key=config.api_key,
            model=config.model,
            timeout=config.timeout,
        )
        return cls({config.name: model})

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ModelRegistry":
        return cls.from_config(load_model_config(env_file))

    @property
    def names(self) -> list[str]:
        return sorted(self._models.keys())

    def get_model(self, name: str) -> ChatModel:
        if name not in self._models:
            raise ModelResolutionError(
                f"No model registered under '{name}' (available: {self.names})"
            )

        model = self._models[name]
        if not isinstance(model, ChatModel):
            raise ModelResolutionError(
                f"Model '{name}' of type {type(model).__name__} does not support chat completion"
            )

        logger.debug(f"Resolved model '{name}' to {model!r}")
        return model
