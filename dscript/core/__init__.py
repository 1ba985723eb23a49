"""Scanner, parser and interpreter: everything between source text and side effects."""
