"""Heading anchor generation and matching."""
