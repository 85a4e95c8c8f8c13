"""Shell adapters: external process execution."""
