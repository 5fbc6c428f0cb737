"""Serializers that read the canonical tree and emit flat formats."""
