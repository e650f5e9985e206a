from .errors import PrototypeFormatError


def read_proto_topics(path):
    """
    Read prototype topics, one per line as ``label<TAB>word word ...``.

    Blank lines and lines starting with ``#`` are skipped. Words are
    lower-cased to match the tokenizer.

    :return: Dict of topic label to prototype words, in file order.
    """
    try:
        with open(path, "r", encoding="utf8") as proto_file:
            lines = proto_file.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise PrototypeFormatError(path, None, str(e)) from e

    proto_topics = {}
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        label, _, words = line.partition("\t")
        label = label.strip()
        words = words.lower().split()
        if not words:
            raise PrototypeFormatError(path, line_number, "no prototype words for {!r}".format(label))
        if label in proto_topics:
            raise PrototypeFormatError(path, line_number, "duplicate topic {!r}".format(label))
        proto_topics[label] = words
    return proto_topics
