"""
Per-document topic proportions, ranked and written as text.
"""

import numpy as np

from .corpus import NO_TOPIC, index_items
from .errors import EmptyDocumentError

HEADER = "source\ttopic:proportion...\n"


def document_topic_counts(document, n_topics, n_words):
    """
    Count the topics of the document's in-vocabulary tokens.

    :return: Topic counts and the number of in-vocabulary tokens.
    """
    valid = document.tokens < n_words
    assigned = document.topics[valid & (document.topics != NO_TOPIC)]
    counts = np.bincount(assigned, minlength=n_topics)
    return counts, int(valid.sum())


def rank_topics(document, n_topics, n_words, smooth):
    """
    Rank topics by smoothed proportion, highest first, stopping before the
    first topic whose proportion is zero. Ties keep topic id order.

    :raises EmptyDocumentError: The document has no in-vocabulary tokens.
    """
    counts, doc_len = document_topic_counts(document, n_topics, n_words)
    if doc_len == 0:
        raise EmptyDocumentError(document.source)
    proportions = (smooth + counts) / doc_len
    ranked = []
    for topic in np.argsort(-proportions, kind="stable"):
        if proportions[topic] == 0.0:
            break
        ranked.append((int(topic), float(proportions[topic])))
    return ranked


def format_topic_distributions(corpus, n_topics, n_words, topic_labels, smooth):
    lines = [HEADER]
    for document in corpus:
        ranked = rank_topics(document, n_topics, n_words, smooth)
        line = "{}\t".format(document.source)
        line += "".join("{} {} ".format(topic_labels[topic], proportion) for topic, proportion in ranked)
        lines.append(line + "\n")
    return lines


def write_topic_distributions(path, corpus, n_topics, n_words, topic_index, smooth):
    """
    Write one ranked topic distribution per document.

    Every document is ranked before the file is opened, so a document
    without valid tokens leaves no partial output behind.
    """
    lines = format_topic_distributions(corpus, n_topics, n_words, index_items(topic_index), smooth)
    with open(path, "w", encoding="utf8") as output_file:
        output_file.writelines(lines)


def type_topic_distributions(corpus, n_topics, n_types, gamma):
    """
    Topic proportions per document type, smoothed with ``gamma``.

    :return: ``(n_types, n_topics)`` array whose rows sum to one.
    """
    type_topic_counts = np.zeros((n_types, n_topics))
    for document in corpus:
        assigned = document.topics[document.topics != NO_TOPIC]
        counts = np.bincount(assigned, minlength=n_topics)
        for type_ in document.types:
            type_topic_counts[type_] += counts
    return (type_topic_counts + gamma) / (type_topic_counts + gamma).sum(axis=1).reshape((-1, 1))


def write_type_topic_distributions(path, corpus, n_topics, topic_index, type_index, gamma):
    distributions = type_topic_distributions(corpus, n_topics, len(type_index), gamma)
    topic_labels = index_items(topic_index)
    with open(path, "w", encoding="utf8") as output_file:
        for type_label, distribution in zip(index_items(type_index), distributions):
            output_file.write("{}\t".format(type_label))
            for topic in np.argsort(-distribution, kind="stable"):
                output_file.write("{} {} ".format(topic_labels[topic], float(distribution[topic])))
            output_file.write("\n")
