"""
Documents, corpora and the word, topic and type indices they are encoded with.
"""

import copy
import csv
import logging

import numpy as np
import pandas as pd
from gensim import corpora

from .errors import CorpusFormatError
from .preprocess import preprocess

logger = logging.getLogger(__name__)

NO_TOPIC = -1


def build_index(items):
    """
    Build a Dictionary whose ids follow the order of ``items``.
    """
    index = corpora.Dictionary()
    for item in items:
        if item not in index.token2id:
            index.token2id[item] = len(index.token2id)
    return index


def index_items(index):
    """
    List the entries of a Dictionary ordered by id.
    """
    return [token for token, _ in sorted(index.token2id.items(), key=lambda pair: pair[1])]


class Document():
    """
    An ordered sequence of word ids with a mutable topic slot per position.

    :ivar source: Identifier written in front of the document's topic distribution.
    :ivar tokens: Word ids in document order.
    :ivar labels: Topic ids the document is labelled with.
    :ivar types: Ids of the document's types, the upper level of a label hierarchy.
    :ivar topics: Current topic of every position, ``NO_TOPIC`` where unassigned.
    """

    def __init__(self, source, tokens, labels=(), types=()):
        self.source = source
        self.tokens = np.asarray(tokens, dtype=np.int64)
        self.labels = list(dict.fromkeys(labels))
        self.types = list(dict.fromkeys(types))
        self.topics = np.full(len(self.tokens), NO_TOPIC, dtype=np.int64)

    def __len__(self):
        return len(self.tokens)

    def __repr__(self):
        return "Document(source={!r}, tokens={}, labels={})".format(self.source, len(self), self.labels)


class Corpus():
    """
    Documents sharing one word index, one topic (label) index and one type index.

    When indices are handed in, as when a trained model reads new documents,
    the word index is copied and extended so that unseen words receive ids at
    or above the trained vocabulary size, and labels or types missing from the
    fixed topic and type indices are dropped.
    """

    def __init__(self, documents, word_index, topic_index, type_index):
        self.documents = documents
        self.word_index = word_index
        self.topic_index = topic_index
        self.type_index = type_index

    @classmethod
    def from_token_lists(cls, sources, texts, labels=None, types=None,
                         word_index=None, topic_index=None, type_index=None):
        if labels is None:
            labels = [[] for _ in texts]
        if types is None:
            types = [[] for _ in texts]
        if not len(sources) == len(texts) == len(labels) == len(types):
            raise ValueError("sources, texts, labels and types must have the same length")

        if word_index is None:
            word_index = corpora.Dictionary(texts)
        else:
            word_index = copy.deepcopy(word_index)
            word_index.add_documents(texts)
        if topic_index is None:
            topic_index = build_index(label for document_labels in labels for label in document_labels)
        if type_index is None:
            type_index = build_index(type_ for document_types in types for type_ in document_types)

        documents = []
        for source, text, document_labels, document_types in zip(sources, texts, labels, types):
            label_ids = _lookup(topic_index, document_labels, source, "label")
            type_ids = _lookup(type_index, document_types, source, "type")
            documents.append(Document(source, word_index.doc2idx(text), label_ids, type_ids))
        return cls(documents, word_index, topic_index, type_index)

    @property
    def n_words(self):
        return len(self.word_index)

    @property
    def n_topics(self):
        return len(self.topic_index)

    @property
    def n_tokens(self):
        return sum(len(document) for document in self.documents)

    def __iter__(self):
        return iter(self.documents)

    def __len__(self):
        return len(self.documents)

    def __getitem__(self, index):
        return self.documents[index]


def _lookup(index, items, source, kind):
    ids = []
    for item in items:
        if item in index.token2id:
            ids.append(index.token2id[item])
        else:
            logger.warning("Ignoring unknown %s %r of document %s", kind, item, source)
    return ids


def read_corpus(path, word_index=None, topic_index=None, type_index=None, stem=False,
                custom_stop_words=(), source_name="source", labels_name="labels",
                text_name="text", types_name="types"):
    """
    Read a tab separated corpus file with a header row.

    Every row holds a document: its source identifier, its whitespace
    separated labels, its raw text and, optionally, its whitespace separated
    types.
    """
    try:
        dataframe = pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False,
                                quoting=csv.QUOTE_NONE, encoding="utf8")
    except (OSError, ValueError) as e:
        raise CorpusFormatError(path, str(e)) from e
    for column in (source_name, labels_name, text_name):
        if column not in dataframe.columns:
            raise CorpusFormatError(path, "missing column {!r}".format(column))

    vocabulary = word_index.token2id if word_index is not None else None
    texts = preprocess(list(dataframe[text_name]), stem=stem, custom_stop_words=custom_stop_words,
                       vocabulary=vocabulary)
    labels = [value.split() for value in dataframe[labels_name]]
    if types_name in dataframe.columns:
        types = [value.split() for value in dataframe[types_name]]
    else:
        types = None
    corpus = Corpus.from_token_lists(list(dataframe[source_name]), texts, labels, types,
                                     word_index=word_index, topic_index=topic_index,
                                     type_index=type_index)
    logger.info("Read %d documents and %d tokens from %s", len(corpus), corpus.n_tokens, path)
    return corpus
