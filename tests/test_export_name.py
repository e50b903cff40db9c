from __future__ import annotations

import pytest

from utils.export_name import export_filename, slugify_name


def test_simple_names():
    assert export_filename("X", "Y") == "x-y-vcard-qr.png"


def test_empty_names_use_default():
    assert export_filename("", "") == "contact-vcard-qr.png"
    assert export_filename("  ", " ") == "contact-vcard-qr.png"


@pytest.mark.parametrize(
    "first, last, expected",
    [
        ("Max", "", "max"),
        ("", "Mustermann", "mustermann"),
        ("Jean-Luc", "O'Neil", "jean-luc-o-neil"),
        ("  Ana ", "  Pop  ", "ana-pop"),
        ("Émile", "Zola", "mile-zola"),
        ("!!!", "???", ""),
    ],
)
def test_slug_rules(first, last, expected):
    assert slugify_name(first, last) == expected


def test_only_symbols_fall_back_to_default():
    assert export_filename("!!!", "???") == "contact-vcard-qr.png"
