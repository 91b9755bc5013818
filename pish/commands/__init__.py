from .executor import ChainExecutor
from .parser import parse_chain

__all__ = ["ChainExecutor", "parse_chain"]
