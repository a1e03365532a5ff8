"""Adapters for the filesystem and batch manifests."""
