"""Shell command adapters."""
