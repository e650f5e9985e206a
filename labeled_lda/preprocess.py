from nltk.tokenize import RegexpTokenizer
from nltk.stem.porter import PorterStemmer
from stop_words import get_stop_words


TOKEN_PATTERN = r'\w+\'[a-z]+|\w+'


def preprocess(documents, stem=False, custom_stop_words=(), vocabulary=None):
    """
    Tokenize raw document strings into lists of lower-cased tokens with
    English stop words removed.

    When ``stem`` is set, tokens are Porter-stemmed and every stem is then
    replaced by the surface form it was most often produced from, so the
    vocabulary stays readable. Given a ``vocabulary`` of known surface
    forms, a stem shared with a known word maps to that word instead, so
    new documents line up with a vocabulary built from earlier ones.
    """
    tokenizer = RegexpTokenizer(TOKEN_PATTERN)
    en_stop = set(get_stop_words('en'))
    en_stop.update(word.lower() for word in custom_stop_words)

    texts = []
    for document in documents:
        tokens = tokenizer.tokenize(document.lower())
        texts.append([token for token in tokens if token not in en_stop])
    if not stem:
        return texts

    p_stemmer = PorterStemmer()
    stem_to_possible_words = {}
    stemmed_texts = []
    for text in texts:
        stemmed_tokens = []
        for token in text:
            token_stem = p_stemmer.stem(token)
            stem_to_possible_words.setdefault(token_stem, []).append(token)
            stemmed_tokens.append(token_stem)
        stemmed_texts.append(stemmed_tokens)
    stem_to_word = {}
    for token_stem, possible_words in stem_to_possible_words.items():
        # ties go to the alphabetically first form so the result is stable
        stem_to_word[token_stem] = max(sorted(set(possible_words)), key=possible_words.count)
    if vocabulary is not None:
        for word in sorted(vocabulary):
            word_stem = p_stemmer.stem(word)
            if word_stem in stem_to_word:
                stem_to_word[word_stem] = word
    return [[stem_to_word[token] for token in text] for text in stemmed_texts]
