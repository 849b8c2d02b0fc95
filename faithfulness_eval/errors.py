class EvaluationError(Exception):
    """Base class for every failure of a faithfulness evaluation."""


class ModelResolutionError(EvaluationError, LookupError):
    """No model is registered under the requested name, or it cannot do chat completion."""


class InvocationError(EvaluationError):
    """The model call itself failed (transport, authentication or model-side error)."""


class FormatError(EvaluationError, ValueError):
    """The reply does not contain the expected <feedback> and <score> blocks."""


class ParseError(EvaluationError, ValueError):
    """The <score> block does not hold a base-10 integer."""
