"""StyleMatch - outfit completion from a single garment photo.

A vision model suggests complementary items, and text embeddings match
each suggestion against a product catalog.
"""

__version__ = "0.1.0"
__author__ = "StyleMatch Team"
