"""
Tests for default data seeding.
"""
from fintrack.storage.seed import (
    DEFAULT_ACCOUNTS,
    DEFAULT_CATEGORIES,
    DEFAULT_GLOSSARY_TERMS,
    seed_defaults,
)


def test_seed_goes_through_the_create_path(database_storage) -> None:
    summary = seed_defaults(database_storage)

    assert summary == {
        "accounts_created": 4,
        "categories_created": 9,
        "glossary_terms_created": 10,
    }
    assert len(database_storage.list_accounts()) == len(DEFAULT_ACCOUNTS)
    assert len(database_storage.list_categories()) == len(DEFAULT_CATEGORIES)
    terms = [g.term for g in database_storage.list_glossary_terms()]
    assert terms == sorted(t.term for t in DEFAULT_GLOSSARY_TERMS)


def test_default_accounts_have_a_single_default() -> None:
    assert [a.name for a in DEFAULT_ACCOUNTS if a.is_default] == ["Checking Account"]
    assert {a.account_type for a in DEFAULT_ACCOUNTS} == {"checking", "savings", "credit", "investment"}
