"""
Convert between mbox archives and directories of eml files.

Messages are moved as opaque bytes: headers are never parsed, and a message
read back from an mbox written here is byte-for-byte the one that went in.
"""

__version__ = "0.1.0"
