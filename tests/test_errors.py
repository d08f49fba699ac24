import pytest

from glicol.errors import (
    GlicolError,
    NonExistReferenceError,
    NonExistSampleError,
    ParseError,
    Rule,
    get_error_info,
)


def test_get_error_info_returns_positives_and_negatives():
    err = ParseError([Rule.INTEGER], [Rule.NUMBER], position=0, code="o: delayn 0.5")
    assert get_error_info(err) == ([Rule.INTEGER], [Rule.NUMBER])


def test_get_error_info_rejects_other_errors():
    with pytest.raises(TypeError):
        get_error_info(NonExistReferenceError("~a"))


def test_parse_error_position_on_first_line():
    err = ParseError([Rule.REFERENCE], position=0, code="o: sin 440")
    assert (err.line, err.column) == (1, 1)


def test_parse_error_position_on_later_line():
    code = "o: sin 440\n>> mul x"
    err = ParseError([Rule.NUMBER], position=code.index("x"), code=code)
    assert err.line == 2
    assert err.column == 8


def test_parse_error_position_is_clamped():
    code = "abc"
    err = ParseError([Rule.LINE], position=100, code=code)
    assert err.position == len(code)


def test_parse_error_message_names_expected_rules():
    err = ParseError([Rule.REFERENCE, Rule.NUMBER], code="o: mul")
    assert "reference" in str(err)
    assert "number" in str(err)
    assert str(err).startswith("Parsing error")


def test_parse_error_is_glicol_error():
    with pytest.raises(GlicolError) as info:
        raise ParseError([Rule.CHAIN])
    positives, _ = get_error_info(info.value)
    assert positives == [Rule.CHAIN]
    assert str(info.value).startswith("Parsing error")


def test_non_exist_reference_message():
    err = NonExistReferenceError("~mod")
    assert str(err) == "There is no reference named ~mod"
    assert err.name == "~mod"


def test_non_exist_sample_message():
    err = NonExistSampleError("\\808")
    assert err.name == "\\808"
    assert str(err).startswith("There is no sample named \\808")


def test_rule_values_match_grammar_names():
    assert Rule("pattern_synth") is Rule.PATTERN_SYNTH
    assert Rule("integer") is Rule.INTEGER