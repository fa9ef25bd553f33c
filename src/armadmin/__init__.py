"""armadmin: admin portal for the Armwrestling fitness app."""

__version__ = "0.1.0"
