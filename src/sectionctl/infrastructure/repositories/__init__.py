"""Connection-scoped repositories that map rows to domain models."""
