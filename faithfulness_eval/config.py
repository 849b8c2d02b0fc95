import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from faithfulness_eval.errors import ModelResolutionError

MODEL_NAME = "evaluator"
TEMPERATURE = 0.5
MAX_TOKENS = 500

logger = logging.getLogger(__name__)


class ModelConfig(BaseModel):
    """Endpoint settings for the model registered under `name`."""

    name: str = MODEL_NAME
    model: str
    api_key: str
    base_url: Optional[str] = None
    timeout: Optional[float] = None

    def __repr__(self) -> str:
        # never print the key
        return f"ModelConfig(name='{self.name}', model='{self.model}', base_url={self.base_url!r}, timeout={self.timeout})"

    class Config:
        frozen = True


def _required(name: str, *fallbacks: str) -> str:
    for key in (name,) + fallbacks:
        value = os.environ.get(key)
        if value:
            return value

    raise ModelResolutionError(
        f"Environment variable {name} is not set, cannot configure the evaluator model"
    )


def load_model_config(env_file: Optional[str] = None) -> ModelConfig:
    """
    Reads the evaluator endpoint from the environment, after loading a .env file if present.

    Variables:
        EVALUATOR_MODEL_NAME: registry name (default "evaluator")
        EVALUATOR_MODEL: model id sent to the backend (required)
        EVALUATOR_API_KEY: API key, falls back to OPENAI_API_KEY (required)
        EVALUATOR_BASE_URL: OpenAI-compatible base url (optional)
        EVALUATOR_TIMEOUT: request timeout in seconds (optional)
    """

    loaded = load_dotenv(dotenv_path=env_file)
    logger.debug(f"Loaded .env file: {loaded}")

    timeout = os.environ.get("EVALUATOR_TIMEOUT")

    config = ModelConfig(
        name=os.environ.get("EVALUATOR_MODEL_NAME") or MODEL_NAME,
        model=_required("EVALUATOR_MODEL"),
        api_key=_required("EVALUATOR_API_KEY", "OPENAI_API_KEY"),
        base_url=os.environ.get("EVALUATOR_BASE_URL") or None,
        timeout=float(timeout) if timeout else None,
    )
    logger.info(f"Evaluator model config: {config!r}")
    return config
