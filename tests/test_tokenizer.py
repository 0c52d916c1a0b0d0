from pagedex.search.tokenizer import STOPWORDS, term_frequencies, tokenize


def test_tokenize_normalizes_case_and_punctuation() -> None:
    assert tokenize("The Rust-Lang Guide!") == ["rust", "lang", "guide"]


def test_tokenize_drops_short_terms_and_stopwords() -> None:
    assert tokenize("a b cd is of x9 it") == ["cd", "x9"]


def test_tokenize_keeps_order_and_repeats() -> None:
    assert tokenize("rust, RUST; Rust") == ["rust", "rust", "rust"]


def test_tokenize_only_stopwords_is_empty() -> None:
    assert tokenize("the a and of") == []
    assert tokenize("") == []


def test_tokenize_unicode_alphanumerics() -> None:
    assert tokenize("Café über-Straße 2024") == ["café", "über", "straße", "2024"]


def test_stopword_set_is_fixed() -> None:
    assert {"the", "and", "a", "is", "of", "in", "on", "for", "with", "to", "or", "by", "an", "it", "be"} == set(
        STOPWORDS
    )


def test_term_frequencies_counts_repeats() -> None:
    freqs = term_frequencies("Rust Guide rust is a systems language")
    assert freqs == {"rust": 2, "guide": 1, "systems": 1, "language": 1}
