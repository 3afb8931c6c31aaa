"""UBIQA

Domain core for a real-estate classifieds marketplace. Owners publish
time-bound property listings that go live after a one-time payment and
expire automatically when their publication window closes.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
