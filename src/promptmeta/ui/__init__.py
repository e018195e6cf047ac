"""UI-facing helpers: payload adapters, input validation and diff formatting."""
