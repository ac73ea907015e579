"""Chain adapters."""
from .base import ChainAdapter
from .cosmos import CosmosAdapter
from .ethereum import EthereumAdapter
from .registry import build_adapters, get_adapter

__all__ = ["ChainAdapter", "CosmosAdapter", "EthereumAdapter", "build_adapters", "get_adapter"]
