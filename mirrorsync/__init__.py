"""
mirrorsync

One-way folder mirroring with rename/move detection and periodic scheduling.

Author: mirrorsync Project
License: MIT
"""

__version__ = "0.1.0"
