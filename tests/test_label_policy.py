"""
Admissible topic sets and prototype word bias.
"""

import numpy as np
import pytest

from labeled_lda.corpus import Document
from labeled_lda.errors import NoAdmissibleTopicsError
from labeled_lda.gibbs_sampling import CountMatrices, topic_scores
from labeled_lda.label_policy import AllTopics, DocumentLabels, LabelHierarchy, PrototypeTopics


def test_all_topics_ignores_labels():
    document = Document("doc", [0, 1], labels=[2])

    assert AllTopics(4).topics(document).tolist() == [0, 1, 2, 3]


def test_document_labels_keep_declared_order_without_duplicates():
    document = Document("doc", [0, 1], labels=[3, 1, 3])

    assert DocumentLabels().topics(document).tolist() == [3, 1]


def test_document_without_labels_has_no_admissible_topics():
    with pytest.raises(NoAdmissibleTopicsError) as excinfo:
        DocumentLabels().topics(Document("unlabelled", [0]))

    assert excinfo.value.source == "unlabelled"


def test_hierarchy_expands_labels_with_topics_of_the_document_types(corpus):
    policy = LabelHierarchy.from_corpus(corpus)
    animals = corpus.type_index.token2id["animals"]
    pets = corpus.topic_index.token2id["pets"]
    finance = corpus.topic_index.token2id["finance"]

    assert policy.hierarchy[animals] == [pets]
    assert policy.topics(Document("doc", [0], labels=[finance], types=[animals])).tolist() == [finance, pets]
    assert policy.topics(Document("doc", [0], types=[animals])).tolist() == [pets]


def test_hierarchy_without_labels_or_known_types_fails():
    policy = LabelHierarchy({0: [1]})

    with pytest.raises(NoAdmissibleTopicsError):
        policy.topics(Document("orphan", [0], types=[5]))


def test_hierarchy_is_deterministic_across_calls():
    policy = LabelHierarchy({0: [2, 1], 1: [1, 0]})
    document = Document("doc", [0], labels=[1], types=[1, 0])

    first = policy.topics(document).tolist()

    assert first == [1, 0, 2]
    assert policy.topics(document).tolist() == first


def test_prototype_word_scores_higher_for_its_topic():
    policy = PrototypeTopics(2, 3, {0: [1]}, weight=0.5)
    counts = CountMatrices(2, 3, np.array([2, 2]), np.array([[1, 1], [1, 1], [0, 0]]))
    topics = policy.topics(Document("doc", [0, 1]))
    doc_topic_counts = np.array([1, 1])

    prototype = topic_scores(1, topics, doc_topic_counts, counts, 0.1, 0.01, 0.03, policy.word_bias)
    plain = topic_scores(0, topics, doc_topic_counts, counts, 0.1, 0.01, 0.03, policy.word_bias)

    assert prototype[0] > plain[0]
    assert prototype[1] == plain[1]
    assert policy.word_bias[:, 1].sum() == 0
