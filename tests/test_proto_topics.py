"""
Prototype topic files.
"""

import pytest

from labeled_lda.errors import PrototypeFormatError
from labeled_lda.proto_topics import read_proto_topics


def test_prototypes_are_read_in_file_order(tmp_path):
    path = tmp_path / "proto.txt"
    path.write_text("# seeds\nsports\tGoal match\n\nfinance\tstock bond\n", encoding="utf8")

    proto_topics = read_proto_topics(path)

    assert list(proto_topics.items()) == [("sports", ["goal", "match"]), ("finance", ["stock", "bond"])]


def test_topic_without_words_is_rejected(tmp_path):
    path = tmp_path / "proto.txt"
    path.write_text("sports\tgoal\nfinance\n", encoding="utf8")

    with pytest.raises(PrototypeFormatError) as excinfo:
        read_proto_topics(path)

    assert excinfo.value.line_number == 2


def test_duplicate_topic_is_rejected(tmp_path):
    path = tmp_path / "proto.txt"
    path.write_text("sports\tgoal\nsports\tmatch\n", encoding="utf8")

    with pytest.raises(PrototypeFormatError):
        read_proto_topics(path)


def test_missing_file_is_reported_without_a_line(tmp_path):
    path = tmp_path / "absent.txt"

    with pytest.raises(PrototypeFormatError) as excinfo:
        read_proto_topics(path)

    assert excinfo.value.path == str(path)
    assert excinfo.value.line_number is None
    assert "line=" not in str(excinfo.value)
