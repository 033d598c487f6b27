from __future__ import annotations

from maskengine.mask.literals import insert_literals_into_raw, remove_literals_from_raw
from maskengine.mask.tokenizer import compile_mask

PHONE = compile_mask("(000) 000-0000")
SSN = compile_mask("000-00-0000")
IP = compile_mask("000.000.000.000")


def test_insert_literals_into_phone_value() -> None:
    assert insert_literals_into_raw(PHONE, "5551234567") == "(555) 123-4567"


def test_insert_literals_stops_at_first_empty_slot() -> None:
    assert insert_literals_into_raw(PHONE, "555") == "(555"


def test_insert_literals_for_ssn_and_ip() -> None:
    assert insert_literals_into_raw(SSN, "123456789") == "123-45-6789"
    assert insert_literals_into_raw(IP, "192168001001") == "192.168.001.001"


def test_insert_literals_empty_returns_empty() -> None:
    assert insert_literals_into_raw(PHONE, "") == ""
    assert insert_literals_into_raw(PHONE, None) == ""


def test_remove_literals_from_phone_value() -> None:
    assert remove_literals_from_raw(PHONE, "(555) 123-4567") == "5551234567"
    assert remove_literals_from_raw(PHONE, "(555") == "555"


def test_remove_literals_from_ssn_and_ip() -> None:
    assert remove_literals_from_raw(SSN, "123-45-6789") == "123456789"
    assert remove_literals_from_raw(IP, "192.168.001.001") == "192168001001"


def test_remove_literals_tolerates_missing_literals() -> None:
    assert remove_literals_from_raw(PHONE, "5551234567") == "5551234567"


def test_remove_literals_empty_returns_empty() -> None:
    assert remove_literals_from_raw(PHONE, "") == ""
    assert remove_literals_from_raw(PHONE, None) == ""


def test_literals_without_mask_pass_through() -> None:
    mask = compile_mask("")

    assert insert_literals_into_raw(mask, "abc") == "abc"
    assert remove_literals_from_raw(mask, "abc") == "abc"


def test_remove_inverts_insert() -> None:
    for raw in ("5", "555", "5551", "5551234567"):
        assert remove_literals_from_raw(PHONE, insert_literals_into_raw(PHONE, raw)) == raw
