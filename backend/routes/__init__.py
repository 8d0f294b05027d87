"""Route modules for the sentiment API."""
