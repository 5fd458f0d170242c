from __future__ import annotations

import pytest

from src.services.spelling import SpellingCorrector


def test_known_words_are_lowercased():
    corrector = SpellingCorrector()
    assert corrector.correct("Rwanda") == "rwanda"
    assert corrector.correct("DOCTOR") == "doctor"


def test_single_edit_typos_are_corrected():
    corrector = SpellingCorrector()
    assert corrector.correct("brnch") == "branch"
    assert corrector.correct("emergncy") == "emergency"
    assert corrector.correct("doctr") == "doctor"
    assert corrector.correct("adress") == "address"


def test_unknown_tokens_pass_through_unchanged():
    corrector = SpellingCorrector()
    assert corrector.correct("Monday") == "Monday"
    assert corrector.correct("Kebede") == "Kebede"
    assert corrector.correct("") == ""


def test_correct_text_keeps_token_boundaries():
    corrector = SpellingCorrector()
    assert corrector.correct_text("where is Rwanda brnch") == "where is rwanda branch"


def test_empty_vocabulary_is_rejected():
    with pytest.raises(ValueError):
        SpellingCorrector(vocabulary=[])


def test_adjacent_transposition_counts_as_one_edit():
    corrector = SpellingCorrector()
    assert corrector.correct("doctro") == "doctor"
    assert corrector.correct("brnach") == "branch"


def test_two_edits_away_is_left_alone():
    corrector = SpellingCorrector()
    assert corrector.correct("brnh") == "brnh"


def test_ties_go_to_the_alphabetically_first_word():
    corrector = SpellingCorrector(vocabulary=["cat", "bat"])
    assert corrector.correct("at") == "bat"
