"""VAT invoice service for an automotive repair workshop."""

__version__ = "1.0.0"
