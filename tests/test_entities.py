import pytest

from data_enricher.analysis.entities import LABEL_TO_CATEGORY, EntityExtractor, build_patterns
from data_enricher.core.errors import AnalyzerError


@pytest.fixture(scope="module")
def extractor():
    return EntityExtractor()


def test_organization_with_corporate_suffix(extractor):
    result = extractor.analyze("Great product from Apple Inc. released in 2007!")
    assert "Apple Inc." in result.organizations
    assert "2007" in result.dates


def test_people_places_and_dates(extractor):
    result = extractor.analyze("Dr. Smith flew to Paris on Monday.")
    assert result.people == ["Dr. Smith"]
    assert result.places == ["Paris"]
    assert result.dates == ["Monday"]


def test_money_values(extractor):
    result = extractor.analyze("They raised $5 million and spent 20 dollars on lunch.")
    assert result.values == ["$5 million", "20 dollars"]


def test_no_entities_gives_empty_lists(extractor):
    result = extractor.analyze("nothing to see here")
    assert result.to_dict() == {"people": [], "places": [], "organizations": [], "dates": [], "values": []}


def test_every_pattern_label_maps_to_a_category():
    labels = {p["label"] for p in build_patterns()}
    assert labels == set(LABEL_TO_CATEGORY)


def test_extra_patterns_are_added():
    extractor = EntityExtractor(extra_patterns=[{"label": "ORG", "pattern": "Acme"}])
    assert extractor.analyze("Acme shipped it").organizations == ["Acme"]


def test_unknown_language_raises_analyzer_error():
    with pytest.raises(AnalyzerError, match="entities"):
        EntityExtractor(language="zz-not-a-language").analyze("Paris")
