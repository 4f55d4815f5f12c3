"""Django apps of the spot reservation service."""
