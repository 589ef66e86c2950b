"""HTTP clients for remote graph services."""
