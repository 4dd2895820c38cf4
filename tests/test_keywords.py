from cafe_details.domain.keywords import DEFAULT_MENU_KEYWORDS, count_keywords, extract_keywords
from cafe_details.domain.models import RemoteReview, Review

VOCABULARY = ["matcha", "sandwich", "tiramisu"]


def test_counts_a_term_once_per_review():
    reviews = [{"text": "Great matcha latte and matcha cake"}, {"text": "Loved the tiramisu"}]

    assert extract_keywords(reviews, VOCABULARY) == ["matcha", "tiramisu"]
    assert count_keywords(reviews, VOCABULARY) == {"matcha": 1, "tiramisu": 1}


def test_unmatched_terms_are_excluded():
    reviews = [{"text": "just coffee"}, {"text": "a sandwich"}]

    result = extract_keywords(reviews, VOCABULARY)

    assert result == ["sandwich"]
    counts = count_keywords(reviews, VOCABULARY)
    assert all(counts[term] >= 1 for term in result)


def test_ranked_by_count_descending():
    reviews = [
        {"text": "matcha"},
        {"text": "tiramisu"},
        {"text": "tiramisu again"},
        {"text": "TIRAMISU!!"},
        {"text": "sandwich and matcha"},
    ]

    assert extract_keywords(reviews, VOCABULARY) == ["tiramisu", "matcha", "sandwich"]


def test_ties_keep_first_match_order():
    # sandwich matches first although it comes later in the vocabulary
    reviews = [{"text": "a sandwich"}, {"text": "matcha"}]

    assert extract_keywords(reviews, VOCABULARY) == ["sandwich", "matcha"]


def test_matching_is_case_insensitive_substring():
    reviews = [{"text": "The MatchaTiramisu fusion"}]

    assert extract_keywords(reviews, ["Matcha", "tiramisu"]) == ["matcha", "tiramisu"]


def test_skips_missing_and_empty_text():
    reviews = [{}, {"text": ""}, {"text": None}, {"rating": 5}, {"text": "matcha"}]

    assert extract_keywords(reviews, VOCABULARY) == ["matcha"]


def test_accepts_review_objects():
    reviews = [
        Review(text="sandwich heaven", rating=5),
        RemoteReview(author_name="Ana", text="sandwich and matcha"),
        RemoteReview(author_name="Ben"),
    ]

    assert extract_keywords(reviews, VOCABULARY) == ["sandwich", "matcha"]


def test_empty_inputs():
    assert extract_keywords([], VOCABULARY) == []
    assert extract_keywords([{"text": "matcha"}], []) == []


def test_duplicate_vocabulary_terms_count_once():
    reviews = [{"text": "matcha"}]

    assert count_keywords(reviews, ["matcha", "MATCHA", ""]) == {"matcha": 1}


def test_whitespace_in_terms_is_kept():
    assert extract_keywords([{"text": "Pieces of cake"}], [" pie"]) == []
    assert extract_keywords([{"text": "Warm apple pie"}], [" pie"]) == [" pie"]


def test_repeated_calls_return_the_same_result():
    reviews = [{"text": "tiramisu"}, {"text": "matcha tiramisu"}]

    first = extract_keywords(reviews, DEFAULT_MENU_KEYWORDS)
    second = extract_keywords(reviews, DEFAULT_MENU_KEYWORDS)

    assert first == second == ["tiramisu", "matcha"]
