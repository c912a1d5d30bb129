import re
import sys
import unicodedata
from functools import lru_cache
from typing import Dict, Iterable, List

WHITESPACE = re.compile(r'\s+')


@lru_cache(maxsize=None)
def punctuation_table() -> Dict[int, str]:
    """Translation table mapping every Unicode punctuation code point (categories P*) to a space."""
    punctuation = ''.join(
        chr(cp) for cp in range(sys.maxunicode + 1)
        if unicodedata.category(chr(cp)).startswith('P')
    )
    return str.maketrans(punctuation, ' ' * len(punctuation))


class TextPreprocessor:
    """Turns raw text into terms and term counts."""

    def tokenize(self, text: str) -> List[str]:
        """
        Split text into terms.

        Punctuation becomes a space, the result is lowercased and split on
        runs of whitespace. Text starting with a delimiter yields a leading
        empty-string term, which is kept; trailing empty strings are dropped.

        Args:
            text: Input text string

        Returns:
            List of terms in document order
        """
        if not text:
            return []

        text = text.translate(punctuation_table()).lower()
        tokens = WHITESPACE.split(text)

        while tokens and tokens[-1] == '':
            tokens.pop()

        return tokens

    def get_word_frequencies(self, texts: Iterable[str]) -> Dict[str, int]:
        """
        Count terms across multiple text blocks of one document.

        Args:
            texts: Text blocks (paragraphs or fragments)

        Returns:
            Dictionary mapping terms to occurrence counts
        """
        word_freq = {}

        for text in texts:
            for token in self.tokenize(text):
                word_freq[token] = word_freq.get(token, 0) + 1

        return word_freq


_default = TextPreprocessor()


def tokenize(text: str) -> Dict[str, int]:
    """Term counts for a single string."""
    return _default.get_word_frequencies([text])


def count_terms(texts: Iterable[str]) -> Dict[str, int]:
    """Term counts merged across a document's text blocks."""
    return _default.get_word_frequencies(texts)
