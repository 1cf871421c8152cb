"""Ledgerpilot - plain-text business events to a double-entry ledger."""

from ledgerpilot.logging_config import configure_default_logging

configure_default_logging()


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from ledgerpilot.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
