"""
inspect-http - on-demand LAN static file servers

Starts short-lived HTTP servers rooted at project directories so that a
device on the same local network (e.g. a phone used for live preview) can
fetch files without exposing them to the wider network.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
