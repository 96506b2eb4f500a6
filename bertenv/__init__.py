"""bertenv — environment installer for the BERT text-classification project."""

__version__ = "0.1.0"
