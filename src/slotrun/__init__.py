"""
slotrun: run numbered code fragments stored in instruction sets and
archive their tabular output in a sharded CSV store.
"""

__version__ = "0.1.0"
