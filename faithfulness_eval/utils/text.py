from typing import Any

ELISION = " [...] "


def log_snippet(text: Any, max_length: int = 200) -> str:
    """
    Render a value as a single log line of at most `max_length` characters.

    Newlines are escaped first; overlong text keeps its head and tail around an elision
    marker, since the tail of a model reply usually holds the score.
    """

    text = str(text).replace("\n", "\\n")

    if len(text) <= max_length:
        return text

    head_length = int(max_length * 0.7)
    tail_length = max(max_length - head_length - len(ELISION), 0)

    return text[:head_length] + ELISION + (text[-tail_length:] if tail_length else "")
