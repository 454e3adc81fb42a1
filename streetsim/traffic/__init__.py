"""Traffic package: vehicle ownership, route assignment and population."""
