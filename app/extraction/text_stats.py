import re

_WORD_SEPARATORS = re.compile(r"[\s.,;!?]+")


def count_words(text: str | None) -> int:
    """Whitespace-delimited word count, used for outcomes and OCR results."""
    return len(text.split()) if text else 0


def count_word_tokens(text: str) -> int:
    """Word count that also splits on sentence punctuation."""
    return len([token for token in _WORD_SEPARATORS.split(text) if token])
