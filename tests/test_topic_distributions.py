"""
Ranked topic proportions and their text output.
"""

import numpy as np
import pytest

from labeled_lda.corpus import Corpus, Document, build_index
from labeled_lda.errors import EmptyDocumentError
from labeled_lda.topic_distributions import (
    HEADER,
    rank_topics,
    type_topic_distributions,
    write_topic_distributions,
)


def _document(source, tokens, topics, types=()):
    document = Document(source, tokens, types=types)
    document.topics[:] = topics
    return document


def test_ranking_is_descending_and_stops_at_first_zero():
    document = _document("doc", [0, 1, 2, 0], [2, 0, 2, 2])

    ranked = rank_topics(document, 4, 3, 0.0)

    assert ranked == [(2, 0.75), (0, 0.25)]


def test_smoothing_keeps_every_topic():
    document = _document("doc", [0, 1], [1, 1])

    ranked = rank_topics(document, 3, 2, 0.5)

    assert [topic for topic, _ in ranked] == [1, 0, 2]
    assert ranked[0][1] == pytest.approx(1.25)
    assert ranked[1][1] == pytest.approx(0.25)


def test_out_of_vocabulary_tokens_are_left_out_of_proportions():
    document = _document("doc", [0, 7, 1, 9], [0, -1, 1, -1])

    ranked = rank_topics(document, 2, 3, 0.0)

    assert ranked == [(0, 0.5), (1, 0.5)]


def test_document_without_valid_tokens_is_an_error():
    document = _document("empty", [5, 6], [-1, -1])

    with pytest.raises(EmptyDocumentError) as excinfo:
        rank_topics(document, 2, 3, 0.0)

    assert excinfo.value.source == "empty"


def test_written_distributions_use_topic_labels(tmp_path):
    documents = [_document("a", [0, 1, 1], [1, 1, 0]), _document("b", [1], [0])]
    corpus = Corpus(documents, build_index(["x", "y"]), build_index(["sports", "news"]), build_index([]))
    path = tmp_path / "topics.txt"

    write_topic_distributions(path, corpus, 2, 2, corpus.topic_index, 0.0)

    lines = path.read_text(encoding="utf8").split("\n")
    assert lines[0] + "\n" == HEADER
    assert lines[1] == "a\tnews {} sports {} ".format(2 / 3, 1 / 3)
    assert lines[2] == "b\tsports 1.0 "


def test_empty_document_leaves_no_partial_output(tmp_path):
    documents = [_document("a", [0], [0]), _document("empty", [4], [-1])]
    corpus = Corpus(documents, build_index(["x"]), build_index(["t"]), build_index([]))
    path = tmp_path / "topics.txt"

    with pytest.raises(EmptyDocumentError):
        write_topic_distributions(path, corpus, 1, 1, corpus.topic_index, 0.0)

    assert not path.exists()


def test_type_distributions_are_smoothed_and_normalised():
    documents = [_document("a", [0, 1], [0, 0], types=[0]), _document("b", [0], [1], types=[0, 1])]

    distributions = type_topic_distributions(documents, 2, 3, 0.5)

    assert np.allclose(distributions.sum(axis=1), 1.0)
    assert distributions[0].tolist() == pytest.approx([2.5 / 4, 1.5 / 4])
    assert distributions[2].tolist() == pytest.approx([0.5, 0.5])
