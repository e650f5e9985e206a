"""
Error types for labeled_lda.
"""


class TopicModelError(RuntimeError):
    """
    Base class for every error raised by the topic models.
    """


class EmptyDocumentError(TopicModelError):
    """
    A document has no tokens inside the trained vocabulary, so its topic
    proportions are undefined.

    :param source: Source identifier of the document.
    :type source: str
    """

    def __init__(self, source):
        self.source = source
        super().__init__("Document has no valid tokens: source={}".format(source))


class NoAdmissibleTopicsError(TopicModelError):
    """
    A document has no topic its tokens may be assigned to.

    :param source: Source identifier of the document.
    :type source: str
    """

    def __init__(self, source):
        self.source = source
        super().__init__("Document has no admissible topics: source={}".format(source))


class ModelFormatError(TopicModelError):
    """
    A saved model could not be written or restored.

    :param path: File the model was read from or written to.
    :type path: str
    :param field: Offending field, or None when the whole file is unusable.
    :type field: str or None
    :param reason: Description of the failure.
    :type reason: str
    """

    def __init__(self, path, field, reason):
        self.path = str(path)
        self.field = field
        self.reason = reason
        message = "Invalid model file: path={}".format(self.path)
        if field is not None:
            message += " field={}".format(field)
        super().__init__("{}: {}".format(message, reason))


class ModelStateError(TopicModelError):
    """
    An operation is not allowed in the model's current state.
    """


class ModelConfigurationError(TopicModelError):
    """
    Model parameters that cannot describe a valid model, such as a
    non-positive gamma or more prototype topics than topics.
    """


class CorpusFormatError(TopicModelError):
    """
    A corpus file could not be parsed.

    :param path: Corpus file path.
    :type path: str
    :param reason: Description of the failure.
    :type reason: str
    """

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__("Invalid corpus file: path={}: {}".format(self.path, reason))


class PrototypeFormatError(TopicModelError):
    """
    A prototype topic file could not be parsed.

    :param path: Prototype file path.
    :type path: str
    :param line_number: One-based line of the failure, or None when the file
        could not be read.
    :type line_number: int or None
    :param reason: Description of the failure.
    :type reason: str
    """

    def __init__(self, path, line_number, reason):
        self.path = str(path)
        self.line_number = line_number
        self.reason = reason
        message = "Invalid prototype topic file: path={}".format(self.path)
        if line_number is not None:
            message += " line={}".format(line_number)
        super().__init__("{}: {}".format(message, reason))
