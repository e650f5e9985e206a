"""
Admissible topics per document, one policy per model variant.

A policy exposes ``topics(document)``, the ordered topic ids the document's
tokens may be assigned to, and ``word_bias``, either None or an
``(n_words, n_topics)`` array of pseudo-counts added to ``beta`` when scoring.
"""

import numpy as np

from .errors import NoAdmissibleTopicsError


class AllTopics():
    """
    Every topic is admissible: unsupervised training and inference.
    """

    word_bias = None

    def __init__(self, n_topics):
        self._topics = np.arange(n_topics, dtype=np.int64)

    def topics(self, document):
        return self._topics


class DocumentLabels():
    """
    Only the document's own labels are admissible.
    """

    word_bias = None

    def topics(self, document):
        if not document.labels:
            raise NoAdmissibleTopicsError(document.source)
        return np.asarray(document.labels, dtype=np.int64)


class LabelHierarchy():
    """
    The document's labels, expanded with every topic owned by one of the
    document's types.

    :param hierarchy: Mapping of type id to the topic ids under that type.
    """

    word_bias = None

    def __init__(self, hierarchy):
        self.hierarchy = {type_: list(dict.fromkeys(topics)) for type_, topics in hierarchy.items()}

    @classmethod
    def from_corpus(cls, corpus):
        """
        Let every type own the labels it co-occurs with in ``corpus``.
        """
        hierarchy = {}
        for document in corpus:
            for type_ in document.types:
                hierarchy.setdefault(type_, []).extend(document.labels)
        return cls(hierarchy)

    def topics(self, document):
        topics = list(document.labels)
        for type_ in document.types:
            topics.extend(self.hierarchy.get(type_, ()))
        topics = list(dict.fromkeys(topics))
        if not topics:
            raise NoAdmissibleTopicsError(document.source)
        return np.asarray(topics, dtype=np.int64)


class PrototypeTopics(AllTopics):
    """
    Every topic is admissible, but a word listed as a prototype of a topic
    gets ``weight`` extra pseudo-counts for that topic.

    :param prototypes: Mapping of topic id to prototype word ids.
    """

    def __init__(self, n_topics, n_words, prototypes, weight):
        super().__init__(n_topics)
        self.word_bias = np.zeros((n_words, n_topics))
        for topic, words in prototypes.items():
            self.word_bias[list(words), topic] = weight
