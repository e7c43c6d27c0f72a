"""create-nx-plugin — scaffold an Nx plugin workspace."""

__version__ = "0.3.0"
