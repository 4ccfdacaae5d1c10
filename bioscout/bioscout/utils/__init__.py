"""HTTP and HTML helpers shared by the adapters."""
