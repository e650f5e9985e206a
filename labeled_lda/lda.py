import logging

import numpy as np
from matplotlib import pyplot as plt

from .corpus import NO_TOPIC, build_index, index_items
from .errors import ModelConfigurationError, ModelFormatError, ModelStateError
from .gibbs_sampling import CountMatrices, GibbsSampler
from .label_policy import AllTopics, DocumentLabels, LabelHierarchy, PrototypeTopics
from .model_state import ModelState, load_model_state, save_model_state
from .topic_distributions import write_topic_distributions, write_type_topic_distributions

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 0.01
DEFAULT_BETA = 0.01
DEFAULT_GAMMA = 0.01
DEFAULT_N_TOPICS = 100
DEFAULT_SEED = 20

VARIANTS = ("LDA", "LLDA", "DDLLDA", "ProtoLDA")


class TopicModel():
    """
    Topic model fitted with collapsed Gibbs sampling.

    All variants share this class. They differ only in the label policy
    deciding which topics a training document may use; inference always
    samples over every topic and leaves the trained counts untouched.

    :param n_topics: Number of topics.
    :param n_words: Size of the training vocabulary.
    :param topic_index: Dictionary of topic labels.
    :param word_index: Dictionary of words.
    :param label_policy: Admissible topics per training document.
    :param seed: Seed of the random state driving every draw.
    """

    def __init__(self, n_topics, n_words, topic_index, word_index, alpha=DEFAULT_ALPHA,
                 beta=DEFAULT_BETA, label_policy=None, variant="LDA", gamma=None,
                 type_index=None, seed=DEFAULT_SEED):
        if variant not in VARIANTS:
            raise ValueError("Unknown variant {!r}, expected one of {}".format(variant, ", ".join(VARIANTS)))
        self.n_topics = n_topics
        self.n_words = n_words
        self.alpha = alpha
        self.beta = beta
        self.beta_sum = beta * n_words
        self.gamma = gamma
        self.variant = variant

        self.counts = CountMatrices(n_topics, n_words)

        self.topic_index = topic_index
        self.word_index = word_index
        self.type_index = type_index if type_index is not None else build_index([])

        self.label_policy = label_policy
        self.random_state = np.random.RandomState(seed)
        self.trained = False
        self.log_likelihoods = []

    @property
    def topic_total(self):
        return self.counts.topic_total

    @property
    def word_topic(self):
        return self.counts.word_topic

    def train(self, iterations, corpus):
        """
        Given a corpus whose documents carry the labels the variant needs,
        learn the word distributions of the topics.

        Records the log-likelihood after initialization and after every
        iteration in ``log_likelihoods``.
        """
        if self.label_policy is None:
            raise ModelStateError("{} model restored from disk can only be used for inference".format(self.variant))
        sampler = GibbsSampler(self.counts, self.label_policy, self.alpha, self.beta,
                               self.beta_sum, self.random_state)
        self.log_likelihoods = self._sample(sampler, iterations, corpus)
        self.trained = True
        return self

    def infer(self, iterations, corpus):
        """
        Assign every token of unseen documents a topic under the trained
        model, sampling over all topics.

        :return: Topic assignments per document, ``NO_TOPIC`` for words
            outside the trained vocabulary.
        """
        if not self.trained:
            raise ModelStateError("{} model must be trained before inference".format(self.variant))
        sampler = GibbsSampler(self.counts.frozen(), AllTopics(self.n_topics), self.alpha,
                               self.beta, self.beta_sum, self.random_state)
        self._sample(sampler, iterations, corpus)
        return [document.topics.copy() for document in corpus]

    def _sample(self, sampler, iterations, corpus):
        for document in corpus:
            sampler.add_document(document)
        logger.info("Sampler initialized. %d topics and %d documents.", self.n_topics, len(corpus))
        log_likelihoods = [self.compute_log_likelihood(corpus)]
        for iteration in range(1, iterations + 1):
            logger.info("Sampling iteration %d started.", iteration)
            sampler.sweep(corpus)
            log_likelihoods.append(self.compute_log_likelihood(corpus))
            logger.info("Log-likelihood after iteration %d: %f", iteration, log_likelihoods[-1])
        return log_likelihoods

    def get_theta(self, corpus):
        theta = np.empty((len(corpus), self.n_topics))
        for document_index, document in enumerate(corpus):
            assigned = document.topics[document.topics != NO_TOPIC]
            C_DT = np.bincount(assigned, minlength=self.n_topics)
            theta[document_index] = (C_DT + self.alpha) / (C_DT + self.alpha).sum()
        return theta

    def get_phi(self):
        return (self.word_topic + self.beta) / (self.topic_total + self.beta_sum)

    def compute_log_likelihood(self, corpus):
        log_theta = np.log(self.get_theta(corpus))
        log_phi = np.log(self.get_phi())
        log_prob = 0.
        for document_index, document in enumerate(corpus):
            valid = document.topics != NO_TOPIC
            word_indices = document.tokens[valid]
            topic_indices = document.topics[valid]
            log_prob += np.sum(log_theta[document_index, topic_indices] + log_phi[word_indices, topic_indices])
        return float(log_prob)

    def top_words(self, n_words):
        phi = self.get_phi()
        words = index_items(self.word_index)[:self.n_words]
        top_words = []
        for topic_label, topic in zip(index_items(self.topic_index), phi.T):
            labelled_probabilities = [(words[word_index], prob) for word_index, prob in enumerate(topic)]
            sorted_probabilities = sorted(labelled_probabilities, key=lambda x: x[1], reverse=True)[:n_words]
            top_words.append((topic_label, sorted_probabilities))
        return top_words

    def plot_log_likelihoods(self, path):
        plt.title(self.variant)
        plt.xlabel('iteration')
        plt.ylabel('log likelihood')
        plt.plot(self.log_likelihoods)
        plt.savefig(path)
        plt.close()

    def write_topic_distributions(self, path, corpus, smooth):
        write_topic_distributions(path, corpus, self.n_topics, self.n_words, self.topic_index, smooth)

    def write_type_topic_distributions(self, path, corpus):
        if self.gamma is None:
            raise ModelStateError("{} model has no gamma to smooth type distributions with".format(self.variant))
        write_type_topic_distributions(path, corpus, self.n_topics, self.topic_index,
                                       self.type_index, self.gamma)

    def to_state(self):
        return ModelState(
            variant=self.variant,
            topic_total=self.topic_total.copy(),
            word_topic=self.word_topic.copy(),
            alpha=self.alpha,
            beta=self.beta,
            beta_sum=self.beta_sum,
            n_topics=self.n_topics,
            n_words=self.n_words,
            random_state=self.random_state.get_state(),
            topic_index=index_items(self.topic_index),
            word_index=index_items(self.word_index)[:self.n_words],
            trained=self.trained,
            gamma=self.gamma,
            type_index=index_items(self.type_index),
        )

    @classmethod
    def from_state(cls, state):
        """
        Rebuild a model for inference. The label policy used in training is
        not part of the saved state, so the result cannot be trained further.
        """
        model = cls(state.n_topics, state.n_words, build_index(state.topic_index),
                    build_index(state.word_index), alpha=state.alpha, beta=state.beta,
                    variant=state.variant, gamma=state.gamma,
                    type_index=build_index(state.type_index))
        model.beta_sum = state.beta_sum
        model.counts = CountMatrices(state.n_topics, state.n_words, state.topic_total, state.word_topic)
        model.random_state.set_state(state.random_state)
        model.trained = state.trained
        return model

    def save(self, path):
        save_model_state(path, self.to_state())

    @classmethod
    def load(cls, path):
        state = load_model_state(path)
        if state.variant not in VARIANTS:
            raise ModelFormatError(path, "variant", "unknown variant {!r}".format(state.variant))
        return cls.from_state(state)


def create_lda(n_topics, corpus, alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA, seed=DEFAULT_SEED):
    """
    Unsupervised LDA with topics labelled ``0`` to ``n_topics - 1``.
    """
    topic_index = build_index(str(topic) for topic in range(n_topics))
    return TopicModel(n_topics, corpus.n_words, topic_index, corpus.word_index, alpha, beta,
                      AllTopics(n_topics), variant="LDA", seed=seed)


def create_llda(corpus, alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA, seed=DEFAULT_SEED):
    """
    Labeled LDA: one topic per corpus label, documents restricted to their labels.
    """
    return TopicModel(corpus.n_topics, corpus.n_words, corpus.topic_index, corpus.word_index,
                      alpha, beta, DocumentLabels(), variant="LLDA", seed=seed)


def create_ddllda(corpus, alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA, gamma=DEFAULT_GAMMA,
                  hierarchy=None, seed=DEFAULT_SEED):
    """
    Labeled LDA over a two-level label hierarchy. A document may use its own
    labels and every label owned by one of its types.

    :param hierarchy: Mapping of type label to topic labels. Defaults to
        the labels each type co-occurs with in ``corpus``.
    """
    if gamma <= 0:
        raise ModelConfigurationError("gamma must be positive, got {}".format(gamma))
    if hierarchy is None:
        label_policy = LabelHierarchy.from_corpus(corpus)
    else:
        label_policy = LabelHierarchy({
            corpus.type_index.token2id[type_]: [corpus.topic_index.token2id[label] for label in labels]
            for type_, labels in hierarchy.items()
        })
    return TopicModel(corpus.n_topics, corpus.n_words, corpus.topic_index, corpus.word_index,
                      alpha, beta, label_policy, variant="DDLLDA", gamma=gamma,
                      type_index=corpus.type_index, seed=seed)


def create_proto_lda(n_topics, corpus, proto_topics, alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA,
                     gamma=DEFAULT_GAMMA, seed=DEFAULT_SEED):
    """
    LDA seeded with prototype topics. The first topics are named after the
    prototype topics and every prototype word adds ``gamma`` pseudo-counts
    for its topic; the remaining topics are free.

    :param proto_topics: Mapping of topic label to prototype words.
    """
    if len(proto_topics) > n_topics:
        raise ModelConfigurationError("{} prototype topics do not fit in {} topics".format(len(proto_topics), n_topics))
    labels = list(proto_topics) + ["topic-{}".format(topic) for topic in range(len(proto_topics), n_topics)]
    prototypes = {}
    for topic, (label, words) in enumerate(proto_topics.items()):
        prototypes[topic] = []
        for word in words:
            if word in corpus.word_index.token2id:
                prototypes[topic].append(corpus.word_index.token2id[word])
            else:
                logger.warning("Prototype word %r of topic %r is not in the vocabulary", word, label)
    label_policy = PrototypeTopics(n_topics, corpus.n_words, prototypes, gamma)
    return TopicModel(n_topics, corpus.n_words, build_index(labels), corpus.word_index,
                      alpha, beta, label_policy, variant="ProtoLDA", gamma=gamma, seed=seed)
