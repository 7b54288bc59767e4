"""Composition root: wires ports, adapters and services together."""
