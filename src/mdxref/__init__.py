"""mdxref: cross-reference resolver for converted Markdown batches."""

__version__ = "0.2.0"
