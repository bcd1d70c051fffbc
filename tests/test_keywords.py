from data_enricher.analysis.keywords import DEFAULT_TOP_N, KeywordExtractor, TermCorpus


def test_stop_words_removed_and_lowercased():
    corpus = TermCorpus()
    assert dict(corpus.terms("The Rocket and the ROCKET launched")) == {"rocket": 2, "launched": 1}


def test_first_document_keeps_first_appearance_order_on_ties():
    extractor = KeywordExtractor()
    assert extractor.extract_top("apple banana") == ["apple", "banana"]
    assert len(extractor.corpus) == 1


def test_ranking_depends_on_earlier_documents():
    extractor = KeywordExtractor()
    extractor.extract_top("apple banana")
    # apple already seen once, cherry is new to the corpus
    assert extractor.extract_top("apple cherry") == ["cherry", "apple"]

    fresh = KeywordExtractor()
    assert fresh.extract_top("apple cherry") == ["apple", "cherry"]


def test_term_frequency_outweighs_rarity():
    extractor = KeywordExtractor()
    extractor.extract_top("apple banana")
    assert extractor.extract_top("apple apple apple cherry")[0] == "apple"


def test_at_most_top_n_terms():
    words = "alpha bravo charlie delta echo foxtrot golf hotel india juliet kilo lima"
    keywords = KeywordExtractor().extract_top(words)
    assert len(keywords) == DEFAULT_TOP_N == 10
    assert keywords == words.split()[:10]


def test_stage_does_not_touch_corpus_until_commit():
    extractor = KeywordExtractor()
    staged = extractor.stage("apple banana")
    assert staged.keywords == ["apple", "banana"]
    assert len(extractor.corpus) == 0
    assert extractor.corpus.document_frequency("apple") == 0

    extractor.commit(staged)
    extractor.commit(staged)
    assert len(extractor.corpus) == 1
    assert extractor.corpus.document_frequency("apple") == 1


def test_empty_or_stopword_only_text_gives_no_keywords():
    extractor = KeywordExtractor()
    assert extractor.extract_top("") == []
    assert extractor.extract_top("the and of") == []


def test_ranking_failure_degrades_to_empty_list(caplog):
    def broken(text):
        raise RuntimeError("malformed corpus")

    extractor = KeywordExtractor(TermCorpus(analyzer=broken))
    staged = extractor.stage("apple banana")
    assert staged.keywords == []
    assert any("Keyword ranking failed" in rec.message for rec in caplog.records)
