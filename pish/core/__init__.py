from .continuation import Continuation, LineAssembler, classify
from .state import ShellState
from .tokenizer import tokenize

__all__ = [
    "Continuation",
    "LineAssembler",
    "ShellState",
    "classify",
    "tokenize",
]
