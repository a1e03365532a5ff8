"""URL classification, entity indexing and link resolution."""
