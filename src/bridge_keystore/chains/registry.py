"""Chain adapter registry."""
from __future__ import annotations

from typing import Callable, Dict, Mapping

from ..config import KeystoreConfig
from ..models import Chain
from .base import ChainAdapter
from .cosmos import CosmosAdapter
from .ethereum import EthereumAdapter

_FACTORIES: Dict[Chain, Callable[[KeystoreConfig], ChainAdapter]] = {
    Chain.COSMOS: lambda cfg: CosmosAdapter(prefix=cfg.cosmos_prefix),
    Chain.ETHEREUM: lambda cfg: EthereumAdapter(),
}


def build_adapters(config: KeystoreConfig | None = None) -> Mapping[Chain, ChainAdapter]:
    cfg = config or KeystoreConfig()
    return {chain: factory(cfg) for chain, factory in _FACTORIES.items()}


def get_adapter(chain: Chain | str, config: KeystoreConfig | None = None) -> ChainAdapter:
    chain = Chain.parse(chain)
    try:
        factory = _FACTORIES[chain]
    except KeyError:
        raise ValueError(f"No adapter registered for chain {chain.value}") from None
    return factory(config or KeystoreConfig())


__all__ = ["build_adapters", "get_adapter"]
