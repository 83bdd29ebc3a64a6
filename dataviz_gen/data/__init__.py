"""Dataset sources: synthetic generators and file import."""

from .importer import load_file, parse_csv
from .synthesizer import DataSynthesizer

__all__ = ["DataSynthesizer", "load_file", "parse_csv"]
