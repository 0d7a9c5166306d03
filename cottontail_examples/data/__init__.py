"""
Example data helpers.

Readers for the bundled feature files and random vector generators used to
build query vectors.
"""

from .features import feature_path, parse_feature_line, read_features
from .vectors import random_vector, random_vector_sequence

__all__ = [
    "feature_path",
    "parse_feature_line",
    "read_features",
    "random_vector",
    "random_vector_sequence",
]
