"""Tests for the field/table naming convention."""

import pytest

from schema_designer.inference import (
    candidate_field_names,
    capitalize,
    field_refers_to,
    foreign_key_field_name,
    is_foreign_key_name,
    referenced_table_name,
)


@pytest.mark.parametrize(
    "value, expected",
    [("user", "User"), ("User", "User"), ("blog_post", "Blog_post"), ("", "")],
)
def test_capitalize(value, expected):
    assert capitalize(value) == expected


@pytest.mark.parametrize(
    "field_name, expected",
    [
        ("user_id", "User"),
        ("account_id", "Account"),
        ("blog_post_id", "Blog_post"),
        ("User_id", "User"),
        ("user", None),
        ("userid", None),
        ("_id", None),
        ("field", None),
    ],
)
def test_referenced_table_name(field_name, expected):
    assert referenced_table_name(field_name) == expected


def test_is_foreign_key_name_requires_token():
    assert is_foreign_key_name("user_id")
    assert not is_foreign_key_name("_id")
    assert not is_foreign_key_name("user_ids")


def test_foreign_key_field_name_lowercases():
    assert foreign_key_field_name("User") == "user_id"
    assert foreign_key_field_name("BlogPost") == "blogpost_id"


def test_candidate_field_names_cover_both_directions():
    assert candidate_field_names("User") == {"user_id", "User_id"}
    assert candidate_field_names("BlogPost") == {
        "blogpost_id",
        "blogPost_id",
        "BlogPost_id",
    }
    assert candidate_field_names("") == set()


def test_candidate_field_names_for_lowercase_table():
    # No token capitalizes to a lowercase name; only the lowered form applies
    assert candidate_field_names("user") == {"user_id"}


def test_field_refers_to():
    assert field_refers_to("user_id", "User")
    assert field_refers_to("blogpost_id", "BlogPost")
    assert field_refers_to("user_id", "user")
    assert not field_refers_to("author_id", "User")
    assert not field_refers_to("user", "User")
    assert not field_refers_to("_id", "")


def test_every_candidate_refers_back_to_its_table():
    for table_name in ("User", "BlogPost", "account", "X"):
        for field_name in candidate_field_names(table_name):
            assert field_refers_to(field_name, table_name)
