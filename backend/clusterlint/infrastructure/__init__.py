"""Infrastructure Layer — logging setup."""
