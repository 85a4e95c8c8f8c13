"""Use cases: end-to-end operations invoked by the CLI."""
