import numpy as np

from .corpus import NO_TOPIC


# topic_total - number of tokens assigned to each topic
# word_topic - word topic matrix of counts
class CountMatrices():
    """
    Sufficient statistics of a topic model.

    ``increment`` and ``decrement`` keep ``word_topic.sum(axis=0)`` equal to
    ``topic_total`` after every call.
    """

    def __init__(self, n_topics, n_words, topic_total=None, word_topic=None):
        self.n_topics = n_topics
        self.n_words = n_words
        if topic_total is None:
            topic_total = np.zeros(n_topics, dtype=np.int64)
        if word_topic is None:
            word_topic = np.zeros((n_words, n_topics), dtype=np.int64)
        self.topic_total = topic_total
        self.word_topic = word_topic

    def increment(self, topic, word):
        self.topic_total[topic] += 1
        self.word_topic[word, topic] += 1

    def decrement(self, topic, word):
        self.topic_total[topic] -= 1
        self.word_topic[word, topic] -= 1

    def frozen(self):
        return FrozenCountMatrices(self)


class FrozenCountMatrices():
    """
    Read-only view of trained counts, used while inferring topics for new
    documents. Updates are ignored and the underlying arrays are not writeable
    through this view.
    """

    def __init__(self, counts):
        self.n_topics = counts.n_topics
        self.n_words = counts.n_words
        self.topic_total = counts.topic_total.view()
        self.topic_total.flags.writeable = False
        self.word_topic = counts.word_topic.view()
        self.word_topic.flags.writeable = False

    def increment(self, topic, word):
        pass

    def decrement(self, topic, word):
        pass


def topic_scores(word, topics, doc_topic_counts, counts, alpha, beta, beta_sum, word_bias=None):
    """
    Unnormalized full conditional of ``word`` over the admissible ``topics``.
    """
    prob_word_under_topic_numerator = beta + counts.word_topic[word, topics]
    if word_bias is not None:
        prob_word_under_topic_numerator = prob_word_under_topic_numerator + word_bias[word, topics]
    return (alpha + doc_topic_counts[topics]) * prob_word_under_topic_numerator / \
        (beta_sum + counts.topic_total[topics])


def sample_topic(scores, topics, random_state):
    """
    Draw one of ``topics`` with probability proportional to ``scores``.

    The uniform draw is walked down the cumulative scores and the first topic
    that exhausts it is returned. Rounding can leave the draw above the last
    cumulative score, in which case the last admissible topic is returned.
    """
    sample = random_state.random_sample() * np.sum(scores)
    index = np.searchsorted(np.cumsum(scores), sample)
    return topics[min(index, len(topics) - 1)]


class GibbsSampler():
    """
    Collapsed Gibbs sampler over a corpus.

    The sampler does not know which model variant it serves: ``label_policy``
    decides the admissible topics of each document (and an optional word
    bias), and ``counts`` decides whether global counts change, a
    ``FrozenCountMatrices`` leaving the trained model untouched.
    """

    def __init__(self, counts, label_policy, alpha, beta, beta_sum, random_state):
        self.counts = counts
        self.label_policy = label_policy
        self.alpha = alpha
        self.beta = beta
        self.beta_sum = beta_sum
        self.random_state = random_state
        self.n_topics = counts.n_topics
        self.n_words = counts.n_words

    def add_document(self, document):
        """
        Assign every in-vocabulary token a topic drawn uniformly from the
        document's admissible topics and count it.
        """
        topics = self.label_policy.topics(document)
        for position, word in enumerate(document.tokens):
            if word >= self.n_words:
                document.topics[position] = NO_TOPIC
                continue
            topic = topics[self.random_state.randint(len(topics))]
            document.topics[position] = topic
            self.counts.increment(topic, word)

    def document_topic_counts(self, document):
        assigned = document.topics[document.topics != NO_TOPIC]
        return np.bincount(assigned, minlength=self.n_topics)

    def sample_document(self, document):
        topics = self.label_policy.topics(document)
        word_bias = self.label_policy.word_bias
        doc_topic_counts = self.document_topic_counts(document)
        for position, word in enumerate(document.tokens):
            if word >= self.n_words:
                continue
            current_topic_assignment = document.topics[position]

            self.counts.decrement(current_topic_assignment, word)
            doc_topic_counts[current_topic_assignment] -= 1

            scores = topic_scores(word, topics, doc_topic_counts, self.counts,
                                  self.alpha, self.beta, self.beta_sum, word_bias)
            current_topic_assignment = sample_topic(scores, topics, self.random_state)

            self.counts.increment(current_topic_assignment, word)
            doc_topic_counts[current_topic_assignment] += 1
            document.topics[position] = current_topic_assignment

    def sweep(self, corpus):
        for document in corpus:
            self.sample_document(document)
