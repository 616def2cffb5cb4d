from ai.matcher import keyword_gaps, match_score


def test_full_overlap():
    assert match_score("Python SQL Spark", "python, sql and spark") == {"match_score": 100.0}


def test_no_overlap():
    assert match_score("Cooking", "Python developer")["match_score"] == 0.0


def test_empty_jd_does_not_divide_by_zero():
    assert match_score("Python", "")["match_score"] == 0.0


def test_gaps_keep_jd_order_and_skip_stop_words():
    gaps = keyword_gaps("Python", "The Kafka and Snowflake, plus Kafka with Python")
    assert [w for w, _ in gaps["missing"]] == ["kafka", "snowflake", "plus"]


def test_gaps_respect_top_k():
    gaps = keyword_gaps("", "one two three four", top_k=2)
    assert len(gaps["missing"]) == 2
