"""
Shared corpora for the topic model tests.
"""

import pytest

from labeled_lda.corpus import Corpus

SOURCES = ["pets-1", "finance-1", "mixed-1", "pets-2", "finance-2"]
TEXTS = [
    ["cat", "dog", "cat", "fish", "dog"],
    ["stock", "bond", "stock", "market"],
    ["cat", "stock", "dog", "bond", "market"],
    ["fish", "fish", "cat", "dog"],
    ["market", "bond", "bond", "stock", "stock"],
]
LABELS = [["pets"], ["finance"], ["pets", "finance"], ["pets"], ["finance"]]
TYPES = [["animals"], ["money"], [], ["animals"], ["money"]]


@pytest.fixture
def make_corpus():
    """
    Build a fresh labelled corpus; every call returns independent documents.
    """

    def _make(**kwargs):
        return Corpus.from_token_lists(SOURCES, TEXTS, LABELS, TYPES, **kwargs)

    return _make


@pytest.fixture
def corpus(make_corpus):
    return make_corpus()
