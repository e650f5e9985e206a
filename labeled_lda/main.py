"""
Command line driver: train a topic model on a corpus file, or infer topics
for a corpus file with a saved model.
"""

import argparse
import logging
import os
import sys
import time

from .corpus import read_corpus
from .errors import TopicModelError
from .lda import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    DEFAULT_GAMMA,
    DEFAULT_N_TOPICS,
    DEFAULT_SEED,
    VARIANTS,
    TopicModel,
    create_ddllda,
    create_lda,
    create_llda,
    create_proto_lda,
)
from .proto_topics import read_proto_topics

logger = logging.getLogger(__name__)

FINAL_TOPICS_FILE = "final-topics.txt"
INFERENCE_TOPICS_FILE = "inference-topics.txt"
TYPE_TOPICS_FILE = "topic-distribution.txt"
MODEL_FILE = "model.lda"
LOG_LIKELIHOOD_PLOT_FILE = "log-likelihood.png"


def build_parser():
    parser = argparse.ArgumentParser(
        prog="labeled-lda",
        description="Simple implementation of LDA, LLDA, DDLLDA and ProtoLDA.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-f", "--file", required=True,
                        help="The filename from which to read training or testing instances.")
    parser.add_argument("-o", "--output", help="The output directory.")
    parser.add_argument("-s", "--system", choices=VARIANTS, default="LDA",
                        help="The model to use for training.")
    parser.add_argument("-m", "--model",
                        help="The filename pointing to the model learned during training.")
    parser.add_argument("-i", "--iterations", type=int, required=True,
                        help="The number of iterations for Gibbs sampling.")
    parser.add_argument("--n-topics", type=int, default=DEFAULT_N_TOPICS,
                        help="The number of topics to use in LDA and ProtoLDA.")
    parser.add_argument("--proto-topics",
                        help="The filename pointing to the file holding the proto-topics.")
    parser.add_argument("--alpha", type=float, default=DEFAULT_ALPHA,
                        help="Alpha parameter: smoothing over topic distribution.")
    parser.add_argument("--beta", type=float, default=DEFAULT_BETA,
                        help="Beta parameter: smoothing over unigram distribution.")
    parser.add_argument("--gamma", type=float, default=DEFAULT_GAMMA,
                        help="Gamma parameter: smoothing over the type or prototype distribution.")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED,
                        help="Seed of the random number generator.")
    parser.add_argument("--stem", action="store_true", help="Porter-stem the corpus tokens.")
    parser.add_argument("--top-words", type=int, default=0,
                        help="Log the most probable words of every topic after training.")
    parser.add_argument("--plot", action="store_true",
                        help="Plot the training log-likelihood to the output directory.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    return parser


def output_directory(args):
    if args.output is not None:
        directory = args.output
    elif args.model is not None:
        directory = os.path.dirname(os.path.abspath(args.model))
    else:
        raise TopicModelError("No output directory given")
    if not os.path.isdir(directory):
        os.makedirs(directory)
    return directory


def train(args, directory):
    corpus = read_corpus(args.file, stem=args.stem)
    if args.system == "LLDA":
        model = create_llda(corpus, args.alpha, args.beta, seed=args.seed)
    elif args.system == "DDLLDA":
        model = create_ddllda(corpus, args.alpha, args.beta, args.gamma, seed=args.seed)
    elif args.system == "ProtoLDA":
        if args.proto_topics is None:
            raise TopicModelError("ProtoLDA needs --proto-topics")
        proto_topics = read_proto_topics(args.proto_topics)
        model = create_proto_lda(args.n_topics, corpus, proto_topics, args.alpha, args.beta,
                                 args.gamma, seed=args.seed)
    else:
        model = create_lda(args.n_topics, corpus, args.alpha, args.beta, seed=args.seed)

    start_time = time.time()
    model.train(args.iterations, corpus)
    logger.info("Trained %s in %.1f seconds", model.variant, time.time() - start_time)

    model.save(os.path.join(directory, MODEL_FILE))
    if model.variant == "DDLLDA":
        model.write_type_topic_distributions(os.path.join(directory, TYPE_TOPICS_FILE), corpus)
    if args.plot:
        model.plot_log_likelihoods(os.path.join(directory, LOG_LIKELIHOOD_PLOT_FILE))
    if args.top_words > 0:
        for topic_label, words in model.top_words(args.top_words):
            logger.info("Topic %s: %s", topic_label, " ".join(word for word, _ in words))
    model.write_topic_distributions(os.path.join(directory, FINAL_TOPICS_FILE), corpus, 0.0)


def infer(args, directory):
    model = TopicModel.load(args.model)
    corpus = read_corpus(args.file, word_index=model.word_index, topic_index=model.topic_index,
                         type_index=model.type_index, stem=args.stem)
    start_time = time.time()
    model.infer(args.iterations, corpus)
    logger.info("Inferred topics with %s in %.1f seconds", model.variant, time.time() - start_time)
    smooth = args.gamma if model.variant == "DDLLDA" else args.alpha
    model.write_topic_distributions(os.path.join(directory, INFERENCE_TOPICS_FILE), corpus, smooth)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        directory = output_directory(args)
        if args.model is None:
            train(args, directory)
        else:
            infer(args, directory)
    except TopicModelError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
