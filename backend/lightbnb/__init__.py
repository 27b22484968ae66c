"""LightBnB data-access layer."""
