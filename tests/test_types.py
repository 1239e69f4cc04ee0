"""Tests for _types module."""
import pytest

from hatchery._types import (
    FEMALE,
    GENDERLESS,
    MALE,
    compare,
    gender_label,
    iso_from_ms,
    normalize_gender,
)


def test_normalize_gender_codes_pass_through():
    assert normalize_gender(MALE) == MALE
    assert normalize_gender(FEMALE) == FEMALE
    assert normalize_gender(GENDERLESS) == GENDERLESS


def test_normalize_gender_legacy_words():
    assert normalize_gender("Male") == MALE
    assert normalize_gender("Female") == FEMALE
    assert normalize_gender("Genderless") == GENDERLESS


def test_normalize_gender_unknown_is_genderless():
    assert normalize_gender(None) == GENDERLESS
    assert normalize_gender("robot") == GENDERLESS


def test_gender_label():
    assert gender_label(FEMALE) == "Female"
    assert gender_label("?") == "?"


def test_iso_from_ms():
    assert iso_from_ms(0) == "1970-01-01T00:00:00.000Z"
    assert iso_from_ms(1_704_067_200_123) == "2024-01-01T00:00:00.123Z"


def test_compare_operators():
    assert compare(5, ">=", 3)
    assert compare(3, ">=", 3)
    assert not compare(2, ">=", 3)

    assert compare(3, "<=", 5)
    assert not compare(4, "<=", 3)

    assert compare(4, ">", 3)
    assert compare(2, "<", 3)
    assert compare(3, "==", 3)
    assert compare(3, "!=", 4)


def test_compare_unknown_operator():
    with pytest.raises(ValueError, match="Unknown operator"):
        compare(1, "??", 2)
