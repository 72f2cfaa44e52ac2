"""Network clients."""

from .chain_reader import ChainReader, build_web3

__all__ = ["ChainReader", "build_web3"]
