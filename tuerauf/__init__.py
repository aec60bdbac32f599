"""Door access user registry: registration, serial id allocation and pin hand-off."""
