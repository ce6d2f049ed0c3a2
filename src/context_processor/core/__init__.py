"""Ambient infrastructure: configuration, errors, logging, metrics, health."""
