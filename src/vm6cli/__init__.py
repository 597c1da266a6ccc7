"""vm6cli - async client and command line for the VMmanager 6 API."""

__version__ = "0.1.0"
