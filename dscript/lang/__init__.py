"""Driver-side glue: diagnostics and error handling, sessions and the interactive shell."""
