"""
Collapsed Gibbs sampling for LDA, Labeled LDA and their hierarchical and
prototype-seeded variants.
"""

from .corpus import Corpus, Document, read_corpus
from .lda import TopicModel, create_ddllda, create_lda, create_llda, create_proto_lda

__all__ = [
    "Corpus",
    "Document",
    "TopicModel",
    "create_ddllda",
    "create_lda",
    "create_llda",
    "create_proto_lda",
    "read_corpus",
]
