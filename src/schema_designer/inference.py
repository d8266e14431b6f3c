"""
Naming convention that links foreign-key fields to tables.

A field named ``<token>_id`` refers to the table named ``capitalize(<token>)``:
``user_id`` refers to ``User``, ``blog_post_id`` to ``Blog_post``.

Example:
    >>> referenced_table_name("user_id")
    'User'
    >>> foreign_key_field_name("Account")
    'account_id'
"""

from typing import Optional, Set

FOREIGN_KEY_SUFFIX = "_id"


def capitalize(value: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    return value[:1].upper() + value[1:]


def is_foreign_key_name(field_name: str) -> bool:
    """Check whether a field name follows the ``<token>_id`` convention.

    Args:
        field_name: Field name to test

    Returns:
        True if the name ends with ``_id`` and has a non-empty token
    """
    return (
        field_name.endswith(FOREIGN_KEY_SUFFIX)
        and len(field_name) > len(FOREIGN_KEY_SUFFIX)
    )


def referenced_table_name(field_name: str) -> Optional[str]:
    """Name of the table a field refers to by convention.

    Args:
        field_name: Field name, e.g. ``user_id``

    Returns:
        Table name, e.g. ``User``, or None when the name is not a foreign key
    """
    if not is_foreign_key_name(field_name):
        return None
    token = field_name[: -len(FOREIGN_KEY_SUFFIX)]
    return capitalize(token)


def foreign_key_field_name(table_name: str) -> str:
    """Field name that refers to a table by convention.

    Args:
        table_name: Table name, e.g. ``User``

    Returns:
        Field name, e.g. ``user_id``
    """
    return f"{table_name.lower()}{FOREIGN_KEY_SUFFIX}"


def candidate_field_names(table_name: str) -> Set[str]:
    """Every field name that refers to a table name by convention.

    Args:
        table_name: Table name, e.g. ``BlogPost``

    Returns:
        Field names such as ``{"blogpost_id", "blogPost_id"}``; empty for
        an empty table name
    """
    if not table_name:
        return set()
    names = {foreign_key_field_name(table_name)}
    # Tokens whose capitalized form is the table name
    for first in {table_name[0], table_name[0].lower()}:
        if capitalize(first) == table_name[0]:
            names.add(f"{first}{table_name[1:]}{FOREIGN_KEY_SUFFIX}")
    return names


def field_refers_to(field_name: str, table_name: str) -> bool:
    """Check whether a field name refers to a table name by convention.

    Both directions of the convention count: ``user_id`` refers to ``User``
    (capitalized token) and ``blogpost_id`` refers to ``BlogPost`` (lowered
    table name).

    Args:
        field_name: Field name
        table_name: Table name

    Returns:
        True if either direction links the two names
    """
    if not is_foreign_key_name(field_name):
        return False
    return (
        referenced_table_name(field_name) == table_name
        or foreign_key_field_name(table_name) == field_name
    )
