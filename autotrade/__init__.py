"""autotrade: turns strategy trade decisions into recorded on-chain swaps."""

__version__ = "0.1.0"
