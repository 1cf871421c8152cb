"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def entity_not_found(entity: str) -> str:
    """Return message for missing entity."""
    return f"Entity '{entity}' not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account by ID."""
    return f"Account {account_id} not found"


def account_name_not_found(name: str, entity_id: str) -> str:
    """Return message for an account name that matches nothing in a chart."""
    return f"Account '{name}' not found in chart of entity '{entity_id}'"


def duplicate_account_name(name: str, entity_id: str) -> str:
    """Return message for duplicate account names within one chart."""
    return f"Account with name '{name}' already exists for entity '{entity_id}'"


def duplicate_entity_name(name: str) -> str:
    """Return message for duplicate entity names."""
    return f"Entity with name '{name}' already exists"


def entry_not_found(entry_id: str) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry '{entry_id}' not found"


def schedule_not_found(schedule_id: str) -> str:
    """Return message for missing asset or liability schedule."""
    return f"Schedule '{schedule_id}' not found"


def unbalanced_entry(total_debit, total_credit) -> str:
    """Return message for an entry whose debits and credits differ."""
    return (
        f"Entry is not balanced: debits {total_debit:.2f} != credits {total_credit:.2f}"
    )
