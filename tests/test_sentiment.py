import pytest

from data_enricher.analysis.sentiment import SentimentAnalyzer
from data_enricher.core.models import SentimentResult


@pytest.fixture(scope="module")
def analyzer():
    return SentimentAnalyzer()


def test_positive_word_is_case_folded(analyzer):
    result = analyzer.analyze("Great product from Apple Inc. released in 2007!")
    assert result.positive == ["great"]
    assert result.negative == []
    assert result.score > 0


def test_duplicates_preserved_in_token_order(analyzer):
    result = analyzer.analyze("good bad good")
    assert result.positive == ["good", "good"]
    assert result.negative == ["bad"]
    assert result.score == 2 * analyzer.polarity("good") + analyzer.polarity("bad")


def test_comparative_divides_by_token_count(analyzer):
    result = analyzer.analyze("a terrible awful day")
    assert result.comparative == pytest.approx(result.score / 4)
    assert result.score < 0


def test_empty_text_scores_zero(analyzer):
    result = analyzer.analyze("")
    assert result == SentimentResult()
    assert result.comparative == 0


def test_unknown_tokens_score_zero(analyzer):
    assert analyzer.polarity("qwertyuiop") == 0
    assert analyzer.analyze("qwertyuiop zxcvbnm").score == 0
