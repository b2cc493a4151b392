"""Hardware audio backends."""
