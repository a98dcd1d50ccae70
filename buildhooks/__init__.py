"""buildhooks - bounded pre-build and post-build script runner"""

__version__ = "0.1.0"
