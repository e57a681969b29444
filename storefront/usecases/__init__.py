"""Use-case layer for orchestrating storefront workflows.

Each module coordinates domain rules and ports without performing transport
I/O directly; adapter failures are translated into ``UseCaseError`` codes.
"""
