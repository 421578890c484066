"""skillsync - distribute plugin skills to CLI agents and upload archives."""

__version__ = "0.1.0"
