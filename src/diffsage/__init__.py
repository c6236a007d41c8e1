"""diffsage - budgeted git diff analysis with LLMs."""

__version__ = "0.1.0"
