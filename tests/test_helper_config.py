import logging

import pytest

from shared.logging.logging_setup import CustomFormatter


def test_string_value_is_stripped(helper_config, monkeypatch):
    monkeypatch.setenv("ARCHIVE_TEST_VALUE", "  spaced  ")
    assert helper_config.get_string_val("archive_test_value") == "spaced"


def test_missing_value_without_default_raises(helper_config, monkeypatch):
    monkeypatch.delenv("ARCHIVE_TEST_VALUE", raising=False)
    with pytest.raises(ValueError, match="ARCHIVE_TEST_VALUE"):
        helper_config.get_string_val("ARCHIVE_TEST_VALUE")


def test_empty_value_falls_back_to_default(helper_config, monkeypatch):
    monkeypatch.setenv("ARCHIVE_TEST_VALUE", "")
    assert helper_config.get_string_val("ARCHIVE_TEST_VALUE", default="fallback") == "fallback"


def test_number_values(helper_config, monkeypatch):
    monkeypatch.setenv("ARCHIVE_TEST_INT", "5")
    monkeypatch.setenv("ARCHIVE_TEST_FLOAT", "2.5")
    monkeypatch.setenv("ARCHIVE_TEST_BAD", "five")
    assert helper_config.get_number_val("ARCHIVE_TEST_INT") == 5
    assert helper_config.get_number_val("ARCHIVE_TEST_FLOAT") == 2.5
    with pytest.raises(ValueError, match="not a valid number"):
        helper_config.get_number_val("ARCHIVE_TEST_BAD")


def test_bool_and_list_values(helper_config, monkeypatch):
    monkeypatch.setenv("ARCHIVE_TEST_BOOL", " Yes ")
    monkeypatch.setenv("ARCHIVE_TEST_LIST", "[a, b,,c]")
    assert helper_config.get_bool_val("ARCHIVE_TEST_BOOL") is True
    assert helper_config.get_list_val("ARCHIVE_TEST_LIST") == ["a", "b", "c"]


def test_formatter_prefixes_without_touching_the_record():
    formatter = CustomFormatter("Africa/Casablanca", "%(levelname)s %(message)s")
    record = logging.LogRecord("t", logging.WARNING, __file__, 1, "missing %s", ("p1",), None)

    assert formatter.format(record) == "WARNING ⚠️ missing p1"
    assert record.msg == "missing %s"
    assert record.args == ("p1",)
