import pytest

from data_enricher.analysis.language import CANDIDATE_LANGUAGES, UNKNOWN_LANGUAGE, LanguageGuesser
from data_enricher.analysis.readability import ReadabilityCalculator, round1
from data_enricher.analysis.tokenizer import split_sentences, tokenize
from data_enricher.core.models import ReadabilityResult


def test_tokenize_splits_on_punctuation_and_keeps_case():
    assert tokenize("Hello, World! it's 2024") == ["Hello", "World", "it", "s", "2024"]
    assert tokenize("Привет мир") == ["Привет", "мир"]
    assert tokenize("") == []


def test_split_sentences_drops_empty_spans():
    assert split_sentences("One. Two!! Three?") == ["One", " Two", " Three"]
    assert split_sentences("...") == []


def test_language_english_wins_first():
    guesser = LanguageGuesser()
    assert guesser.analyze("This is one of the best things that we have ever done") == "english"
    assert CANDIDATE_LANGUAGES[0] == "english"


def test_language_unknown_without_stopwords():
    assert LanguageGuesser().analyze("Xylophone quartz zephyr") == UNKNOWN_LANGUAGE
    assert LanguageGuesser().analyze("") == UNKNOWN_LANGUAGE


def test_language_only_first_500_chars_are_sampled():
    text = "x" * 500 + " the and of"
    assert LanguageGuesser().analyze(text) == UNKNOWN_LANGUAGE


def test_language_tie_break_keeps_first_candidate():
    guesser = LanguageGuesser(stopwords={"hola"}, candidates=("spanish", "portuguese"))
    assert guesser.analyze("hola hola") == "spanish"


@pytest.mark.parametrize(
    "value,expected",
    [(2.25, 2.3), (2.5, 2.5), (3.84, 3.8), (0.0, 0.0), (1 / 3, 0.3)],
)
def test_round1_is_half_up(value, expected):
    assert round1(value) == expected


def test_readability_counts_and_averages():
    result = ReadabilityCalculator().analyze("Hello world. How are you?")
    assert result == ReadabilityResult(word_count=5, sentence_count=2, avg_words_per_sentence=2.5, avg_word_length=3.8)


def test_readability_without_sentence_terminator():
    result = ReadabilityCalculator().analyze("no terminator here")
    assert result.sentence_count == 1
    assert result.avg_words_per_sentence == 3.0


def test_readability_empty_text_guards_division():
    result = ReadabilityCalculator().analyze("")
    assert result == ReadabilityResult()
    assert result.to_dict() == {"wordCount": 0, "sentenceCount": 0, "avgWordsPerSentence": 0.0, "avgWordLength": 0.0}
