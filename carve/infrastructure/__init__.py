"""Adapters for external concerns (HTTP API, images, network, storage)."""
