"""Identifier sanitizer rules."""

import pytest

from flowshape.engine.naming import (
    sanitize,
    sanitize_element_name,
    sanitize_field_name,
    singularize,
    to_camel_case,
)


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        None,
        "123abc",
        "xml",
        "XMLData",
        "first name",
        "foo\u2026bar",
        "a\u2013b\u2014c",
        "tags[]",
        "[[]]",
        "ns:tag",
        "héllo wörld",
        "--x",
        ".dot",
        "_ok",
        "$price (EUR)",
    ],
)
def test_element_sanitizer_is_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", "_element"),
        ("   ", "_element"),
        (None, "_element"),
        ("123abc", "_123abc"),
        ("xmlData", "_xmlData"),
        ("XML", "_XML"),
        ("first name", "first_name"),
        ("a  &  b", "a_b"),
        ("foo\u2026bar", "foo_bar"),
        ("tags[]", "tags"),
        ("ns:tag", "ns_tag"),
        ("order.id", "order.id"),
        ("order-id", "order-id"),
    ],
)
def test_sanitize_element_name(raw, expected):
    assert sanitize_element_name(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", "_field"),
        (None, "_field"),
        ("  first   name ", "first_name"),
        ("__id__", "id"),
        ("1st place", "_1st_place"),
        ("unit.price", "unit_price"),
        ("a\u2014b", "a_b"),
    ],
)
def test_sanitize_field_name(raw, expected):
    assert sanitize_field_name(raw) == expected


def test_to_camel_case():
    assert to_camel_case("first_name") == "firstName"
    assert to_camel_case("order-id") == "orderId"
    assert to_camel_case("already") == "already"


def test_singularize():
    assert singularize("categories") == "category"
    assert singularize("boxes") == "box"
    assert singularize("items") == "item"
    assert singularize("class") == "class"
    assert singularize("data") == "data"
