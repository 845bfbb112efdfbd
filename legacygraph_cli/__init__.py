"""LegacyGraph CLI: call-graph reconstruction for legacy automation scripts."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
