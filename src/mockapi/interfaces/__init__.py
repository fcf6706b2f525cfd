"""Transport adapters that route live HTTP clients through the dispatcher."""
