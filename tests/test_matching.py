import pytest

from tribute.core.matching import best_matches, closest_match, edit_distance

WORDS = ["", "a", "kitten", "sitting", "flaw", "lawn", "Tribute", "tribune", "export"]


def test_edit_distance_known_values():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("flaw", "lawn") == 2
    assert edit_distance("", "abc") == 3
    assert edit_distance("abc", "") == 3


@pytest.mark.parametrize("word", WORDS)
def test_edit_distance_identity(word):
    assert edit_distance(word, word) == 0


def test_edit_distance_symmetric_and_triangle():
    for a in WORDS:
        for b in WORDS:
            assert edit_distance(a, b) == edit_distance(b, a)
            for c in WORDS:
                assert edit_distance(a, c) <= edit_distance(a, b) + edit_distance(b, c)


def test_edit_distance_is_case_sensitive():
    assert edit_distance("MIT", "mit") == 3


def test_best_matches_empty_candidates():
    assert best_matches("anything", []) == []


def test_best_matches_exact_query_comes_first():
    assert best_matches("skip", ["skip"]) == ["skip"]
    assert best_matches("export", ["exports", "export", "expert"])[0] == "export"


def test_best_matches_orders_by_distance():
    options = ["allow", "skip", "exclude", "template", "format", "config"]
    assert best_matches("exlude", options) == ["exclude"]
    assert best_matches("skp", options) == ["skip"]


def test_best_matches_rejects_short_unrelated_strings():
    assert best_matches("xyz", ["abc", "list"]) == []


def test_best_matches_prefix_rescues_distant_candidates():
    assert best_matches("a", ["alphabet", "beta"]) == ["alphabet"]


def test_best_matches_is_case_insensitive_and_keeps_spelling():
    assert best_matches("mit", ["MIT", "BSD"]) == ["MIT"]


def test_best_matches_ties_keep_input_order():
    assert best_matches("ab", ["ay", "ax"]) == ["ay", "ax"]


def test_best_matches_empty_query():
    assert best_matches("", ["", "a"]) == [""]


def test_closest_match():
    assert closest_match("lst", ["export", "list", "check", "help", "version"]) == "list"
    assert closest_match("zzz", ["json", "xml", "text"]) is None
