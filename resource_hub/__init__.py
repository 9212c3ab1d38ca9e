"""Resource tree manager for event media."""
__version__ = "1.0.0"
