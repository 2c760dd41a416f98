"""
Default data for a fresh in-memory store.

Everything goes through the store's own create_* methods so identifiers are
assigned the same way as for user data.
"""
from decimal import Decimal
import logging

from fintrack.schemas import AccountCreate, CategoryCreate, GlossaryTermCreate

logger = logging.getLogger(__name__)


DEFAULT_ACCOUNTS: tuple[AccountCreate, ...] = (
    AccountCreate(name="Checking Account", account_type="checking", balance=Decimal("2450.32"), is_default=True),
    AccountCreate(name="Savings Account", account_type="savings", balance=Decimal("8500.00")),
    AccountCreate(name="Credit Card", account_type="credit", balance=Decimal("-1200.50")),
    AccountCreate(name="Investment Account", account_type="investment", balance=Decimal("15750.00")),
)

DEFAULT_CATEGORIES: tuple[CategoryCreate, ...] = (
    CategoryCreate(name="Food & Dining", category_type="expense", color="#3B82F6", icon="utensils", is_default=True),
    CategoryCreate(name="Transportation", category_type="expense", color="#10B981", icon="car", is_default=True),
    CategoryCreate(name="Entertainment", category_type="expense", color="#8B5CF6", icon="film", is_default=True),
    CategoryCreate(name="Shopping", category_type="expense", color="#F59E0B", icon="shopping-bag", is_default=True),
    CategoryCreate(name="Utilities", category_type="expense", color="#EF4444", icon="zap", is_default=True),
    CategoryCreate(name="Healthcare", category_type="expense", color="#06B6D4", icon="heart", is_default=True),
    CategoryCreate(name="Salary", category_type="income", color="#10B981", icon="dollar-sign", is_default=True),
    CategoryCreate(name="Freelance", category_type="income", color="#8B5CF6", icon="briefcase", is_default=True),
    CategoryCreate(name="Investment", category_type="income", color="#F59E0B", icon="trending-up", is_default=True),
)

DEFAULT_GLOSSARY_TERMS: tuple[GlossaryTermCreate, ...] = (
    GlossaryTermCreate(
        term="Annual Percentage Rate (APR)",
        definition="The annual rate charged for borrowing or earned through an investment, including fees and other costs associated with the transaction.",
    ),
    GlossaryTermCreate(
        term="Emergency Fund",
        definition="A savings account specifically designated for unexpected expenses or financial emergencies, typically containing 3-6 months of living expenses.",
    ),
    GlossaryTermCreate(
        term="Net Worth",
        definition="The total value of all assets minus the total value of all liabilities. It represents your overall financial position.",
    ),
    GlossaryTermCreate(
        term="Budget",
        definition="A plan for how to spend your money, tracking income and expenses over a specific period to help achieve financial goals.",
    ),
    GlossaryTermCreate(
        term="Cash Flow",
        definition="The amount of money moving in and out of your accounts over a specific period, showing your financial liquidity.",
    ),
    GlossaryTermCreate(
        term="Compound Interest",
        definition="Interest calculated on the initial principal and accumulated interest from previous periods, leading to exponential growth over time.",
    ),
    GlossaryTermCreate(
        term="Credit Score",
        definition="A numerical representation of your creditworthiness, typically ranging from 300-850, used by lenders to assess lending risk.",
    ),
    GlossaryTermCreate(
        term="Debt-to-Income Ratio",
        definition="The percentage of your monthly gross income that goes toward paying debts, used to measure your ability to manage monthly payments.",
    ),
    GlossaryTermCreate(
        term="Diversification",
        definition="An investment strategy that spreads risk by allocating investments across various financial instruments, industries, and categories.",
    ),
    GlossaryTermCreate(
        term="Liquidity",
        definition="How quickly and easily an asset can be converted into cash without significantly affecting its market price.",
    ),
)


def seed_defaults(storage) -> dict:
    """
    Create the default accounts, categories and glossary terms.

    Returns:
        Counts of created records per entity type
    """
    for account in DEFAULT_ACCOUNTS:
        storage.create_account(account)
    for category in DEFAULT_CATEGORIES:
        storage.create_category(category)
    for term in DEFAULT_GLOSSARY_TERMS:
        storage.create_glossary_term(term)

    summary = {
        "accounts_created": len(DEFAULT_ACCOUNTS),
        "categories_created": len(DEFAULT_CATEGORIES),
        "glossary_terms_created": len(DEFAULT_GLOSSARY_TERMS),
    }
    logger.info(f"[SEED] Seeded defaults: {summary}")
    return summary
