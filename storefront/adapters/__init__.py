"""Adapter package for external I/O implementations.

Purpose:
    Collect the HTTP transport (executor, retry coordinator, error taxonomy)
    and the per-domain REST facades that implement the domain ports.

Dependencies:
    Individual submodules depend on ``requests`` and the domain protocol
    definitions.

Call context:
    Imported by use cases' composition code (for runtime wiring) and by tests
    (with session stubs standing in for the network).
"""
