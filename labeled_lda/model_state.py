"""
Saved form of a trained topic model.

The model is written as a numpy ``.npz`` archive holding exactly the fields
listed in ``FIELDS``, nothing pickled. Every field is checked on load; a file
that fails any check is rejected as a whole.
"""

import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .errors import ModelFormatError

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

RNG_KEYS_LENGTH = 624

# field name, numpy dtype kind(s), number of dimensions
FIELDS = (
    ("format_version", "iu", 0),
    ("variant", "U", 0),
    ("topic_total", "iu", 1),
    ("word_topic", "iu", 2),
    ("alpha", "f", 0),
    ("beta", "f", 0),
    ("beta_sum", "f", 0),
    ("gamma", "f", 0),
    ("n_topics", "iu", 0),
    ("n_words", "iu", 0),
    ("rng_keys", "u", 1),
    ("rng_pos", "iu", 0),
    ("rng_has_gauss", "iu", 0),
    ("rng_cached_gaussian", "f", 0),
    ("topic_index", "U", 1),
    ("word_index", "U", 1),
    ("type_index", "U", 1),
    ("trained", "b", 0),
)


@dataclass
class ModelState:
    """
    Everything needed to rebuild a trained model for inference.

    :ivar random_state: ``numpy.random.RandomState.get_state()`` tuple.
    :ivar gamma: Hierarchy or prototype smoothing, None when the variant has none.
    """

    variant: str
    topic_total: np.ndarray
    word_topic: np.ndarray
    alpha: float
    beta: float
    beta_sum: float
    n_topics: int
    n_words: int
    random_state: Tuple
    topic_index: List[str]
    word_index: List[str]
    trained: bool
    gamma: Optional[float] = None
    type_index: List[str] = field(default_factory=list)


def save_model_state(path, state):
    _, rng_keys, rng_pos, rng_has_gauss, rng_cached_gaussian = state.random_state
    arrays = {
        "format_version": np.int64(FORMAT_VERSION),
        "variant": np.str_(state.variant),
        "topic_total": np.asarray(state.topic_total, dtype=np.int64),
        "word_topic": np.asarray(state.word_topic, dtype=np.int64),
        "alpha": np.float64(state.alpha),
        "beta": np.float64(state.beta),
        "beta_sum": np.float64(state.beta_sum),
        "gamma": np.float64(np.nan if state.gamma is None else state.gamma),
        "n_topics": np.int64(state.n_topics),
        "n_words": np.int64(state.n_words),
        "rng_keys": np.asarray(rng_keys, dtype=np.uint32),
        "rng_pos": np.int64(rng_pos),
        "rng_has_gauss": np.int64(rng_has_gauss),
        "rng_cached_gaussian": np.float64(rng_cached_gaussian),
        "topic_index": np.array(state.topic_index, dtype=str),
        "word_index": np.array(state.word_index, dtype=str),
        "type_index": np.array(state.type_index, dtype=str),
        "trained": np.bool_(state.trained),
    }
    try:
        with open(path, "wb") as model_file:
            np.savez_compressed(model_file, **arrays)
    except OSError as e:
        raise ModelFormatError(path, None, str(e)) from e
    logger.info("Model saved to %s", path)


def load_model_state(path):
    try:
        archive = np.load(path, allow_pickle=False)
    except (OSError, EOFError, ValueError, zipfile.BadZipFile) as e:
        raise ModelFormatError(path, None, str(e)) from e
    if not isinstance(archive, np.lib.npyio.NpzFile):
        raise ModelFormatError(path, None, "not an .npz archive")
    try:
        with archive:
            arrays = {name: archive[name] for name in archive.files}
    except (OSError, EOFError, ValueError, zipfile.BadZipFile, zlib.error) as e:
        raise ModelFormatError(path, None, str(e)) from e

    for name, kinds, ndim in FIELDS:
        if name not in arrays:
            raise ModelFormatError(path, name, "missing")
        value = arrays[name]
        if value.ndim != ndim:
            raise ModelFormatError(path, name, "expected {} dimensions, found {}".format(ndim, value.ndim))
        if value.dtype.kind not in kinds:
            raise ModelFormatError(path, name, "unexpected dtype {}".format(value.dtype))

    version = int(arrays["format_version"])
    if version != FORMAT_VERSION:
        raise ModelFormatError(path, "format_version", "unsupported version {}".format(version))

    n_topics = int(arrays["n_topics"])
    n_words = int(arrays["n_words"])
    topic_total = arrays["topic_total"].astype(np.int64)
    word_topic = arrays["word_topic"].astype(np.int64)
    if topic_total.shape != (n_topics,):
        raise ModelFormatError(path, "topic_total", "expected shape {}, found {}".format((n_topics,), topic_total.shape))
    if word_topic.shape != (n_words, n_topics):
        raise ModelFormatError(path, "word_topic", "expected shape {}, found {}".format((n_words, n_topics), word_topic.shape))
    if (topic_total < 0).any() or (word_topic < 0).any():
        raise ModelFormatError(path, "word_topic", "negative counts")
    if not np.array_equal(word_topic.sum(axis=0), topic_total):
        raise ModelFormatError(path, "topic_total", "does not match the column sums of word_topic")

    alpha = float(arrays["alpha"])
    beta = float(arrays["beta"])
    beta_sum = float(arrays["beta_sum"])
    if not np.isclose(beta_sum, beta * n_words):
        raise ModelFormatError(path, "beta_sum", "{} is not beta * n_words".format(beta_sum))

    topic_index = [str(item) for item in arrays["topic_index"]]
    word_index = [str(item) for item in arrays["word_index"]]
    if len(topic_index) != n_topics:
        raise ModelFormatError(path, "topic_index", "expected {} entries, found {}".format(n_topics, len(topic_index)))
    if len(word_index) != n_words:
        raise ModelFormatError(path, "word_index", "expected {} entries, found {}".format(n_words, len(word_index)))

    rng_keys = arrays["rng_keys"].astype(np.uint32)
    if rng_keys.shape != (RNG_KEYS_LENGTH,):
        raise ModelFormatError(path, "rng_keys", "expected {} keys, found {}".format(RNG_KEYS_LENGTH, rng_keys.size))
    random_state = ("MT19937", rng_keys, int(arrays["rng_pos"]),
                    int(arrays["rng_has_gauss"]), float(arrays["rng_cached_gaussian"]))

    gamma = float(arrays["gamma"])
    state = ModelState(
        variant=str(arrays["variant"]),
        topic_total=topic_total,
        word_topic=word_topic,
        alpha=alpha,
        beta=beta,
        beta_sum=beta_sum,
        n_topics=n_topics,
        n_words=n_words,
        random_state=random_state,
        topic_index=topic_index,
        word_index=word_index,
        trained=bool(arrays["trained"]),
        gamma=None if np.isnan(gamma) else gamma,
        type_index=[str(item) for item in arrays["type_index"]],
    )
    logger.info("Model loaded from %s", path)
    return state
