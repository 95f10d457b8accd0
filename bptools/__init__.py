"""Terraform blueprint helpers: build step timings, a GitHub catalog listing and metadata helpers."""

__version__ = "0.1.0"