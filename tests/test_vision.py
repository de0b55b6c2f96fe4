import pytest

from Brian.agents import extract_vision_bias


@pytest.mark.parametrize("vision", [None, "", "   ", "\n\t"])
def test_blank_vision_yields_no_keywords(vision):
    assert extract_vision_bias(vision) == []


def test_hyphenated_compounds_stay_whole():
    assert extract_vision_bias("privacy-first Ubuntu") == ["privacy-first", "ubuntu"]


def test_same_text_same_keywords():
    vision = (
        "Hybrid Brian is a sovereign Ubuntu-native copilot that combines open intelligence, "
        "repeatable automations, and privacy-first world awareness."
    )
    first = extract_vision_bias(vision)
    assert first == extract_vision_bias(vision)
    assert first == ["hybrid", "brian", "sovereign", "ubuntu-native", "copilot", "combines"]


def test_frequency_then_first_occurrence():
    vision = "local tools, local data, open models and open local workflows"
    assert extract_vision_bias(vision) == ["local", "open", "tools", "data", "models", "workflows"]


def test_stopwords_short_tokens_and_numbers_dropped():
    assert extract_vision_bias("we want it to be 100 percent on my own box") == ["percent", "box"]


def test_keywords_are_deduplicated_and_capped():
    vision = "alpha beta gamma delta epsilon zeta eta theta alpha beta"
    keywords = extract_vision_bias(vision, limit=4)
    assert keywords == ["alpha", "beta", "gamma", "delta"]
    assert len(set(keywords)) == len(keywords)
