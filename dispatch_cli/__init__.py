"""
Dispatch CLI

Commands:
- dispatch serve - Run the sync server
- dispatch snapshot show/check/reset - Board snapshot operations
- dispatch version
"""

__version__ = "0.1.0"
