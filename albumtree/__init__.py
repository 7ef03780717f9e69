"""Album hierarchy manager: nested-set album trees over SQLite."""

__version__ = "0.1.0"
