import pytest

from darwinframe.inifile import IniFile


@pytest.fixture
def settings(tmp_path):
    return IniFile(tmp_path / "config.ini")


def test_missing_file_gives_defaults(settings):
    assert settings.get_string("Walking", "speed", "slow") == "slow"
    assert settings.get_int("Walking", "steps", 7) == 7
    assert settings.get_float("Walking", "ratio", 0.25) == 0.25


def test_string_round_trip(settings):
    settings.put("Head", "name", "tilt")
    assert settings.get_string("Head", "name") == "tilt"


def test_string_with_comment_chars_round_trip(settings):
    settings.put("Head", "note", 'a;b#c "q"')
    assert settings.get_string("Head", "note") == 'a;b#c "q"'


def test_int_round_trip(settings):
    settings.put("Walking", "steps", -42)
    assert settings.get_int("Walking", "steps") == -42


def test_float_round_trip(settings):
    settings.put("Walking", "ratio", 1.5)
    assert settings.get_float("Walking", "ratio") == 1.5


def test_float_is_written_with_six_decimals(settings):
    settings.put("Walking", "ratio", 1.5)
    assert settings.get_string("Walking", "ratio") == "1.500000"


def test_section_and_key_enumeration(settings):
    settings.put("First", "a", 1)
    settings.put("First", "b", 2)
    settings.put("Second", "c", 3)
    assert settings.get_section(0) == "First"
    assert settings.get_section(1) == "Second"
    assert settings.get_section(2) == ""
    assert settings.get_key("First", 0) == "a"
    assert settings.get_key("First", 1) == "b"
    assert settings.get_key("First", 2) == ""


def test_overwrite_keeps_single_key(settings):
    settings.put("S", "k", 1)
    settings.put("S", "k", 2)
    assert settings.get_int("S", "k") == 2
    assert settings.get_key("S", 1) == ""


def test_delete_key(settings):
    settings.put("S", "k", "v")
    settings.put("S", "other", "w")
    settings.delete("S", "k")
    assert settings.get_string("S", "k", "gone") == "gone"
    assert settings.get_string("S", "other") == "w"


def test_delete_section(settings):
    settings.put("S", "k", "v")
    settings.put("T", "x", "y")
    settings.delete("S")
    assert settings.get_string("S", "k", "gone") == "gone"
    assert settings.get_section(0) == "T"


def test_unsupported_type_raises(settings):
    with pytest.raises(TypeError):
        settings.put("S", "k", [1, 2])


def test_case_insensitive_lookup(settings):
    settings.put("Walking", "Speed", 3)
    assert settings.get_int("WALKING", "speed") == 3