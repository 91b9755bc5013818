#!/usr/bin/env python3
"""Chain parser.

A chain is split at the lowest-precedence operator found outside any
parenthesised group, tier by tier:

    ``;``  ->  ``&&`` / ``||``  ->  ``|``  ->  redirections  ->  simple command

Sequencing and conditionals bind at their leftmost occurrence; pipes and
redirections at their rightmost. Each side of a split is parsed again, so
the result is a tree of immutable nodes that the executor walks.
"""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..core.tokenizer import tokenize


class RedirectMode(Enum):
    READ = "<"
    WRITE = ">"
    APPEND = ">>"
    READ_WRITE = "<>"

    @property
    def flags(self) -> int:
        return _REDIRECT_FLAGS[self]

    @property
    def default_fd(self) -> int:
        if self in (RedirectMode.READ, RedirectMode.READ_WRITE):
            return 0
        return 1


_REDIRECT_FLAGS = {
    RedirectMode.READ: os.O_RDONLY,
    RedirectMode.WRITE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    RedirectMode.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    RedirectMode.READ_WRITE: os.O_RDWR | os.O_CREAT,
}


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Simple:
    argv: Tuple[str, ...]


@dataclass(frozen=True)
class Malformed:
    message: str


@dataclass(frozen=True)
class Negate:
    body: "Node"


@dataclass(frozen=True)
class Subshell:
    body: "Node"


@dataclass(frozen=True)
class Sequence:
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class AndOr:
    left: "Node"
    operator: str
    right: "Node"


@dataclass(frozen=True)
class Pipeline:
    stages: Tuple["Node", ...]


@dataclass(frozen=True)
class Redirect:
    body: "Node"
    fd: int
    target: str
    mode: RedirectMode


Node = Union[Empty, Simple, Malformed, Negate, Subshell, Sequence, AndOr, Pipeline, Redirect]

MISSING_PAREN = "syntax error: missing ')'"
_DIGITS = "0123456789"
# Longer digit runs before an operator are command text, not a descriptor.
_MAX_FD_DIGITS = 14


def parse_chain(chain: str) -> Node:
    node = _split_sequence(chain)
    if node is not None:
        return node

    node = _split_and_or(chain)
    if node is not None:
        return node

    node = _split_pipeline(chain)
    if node is not None:
        return node

    node = _split_redirect(chain)
    if node is not None:
        return node

    return _parse_simple(chain)


def _split_sequence(chain: str) -> Optional[Node]:
    depth = 0
    for index, char in enumerate(chain):
        if char == "(":
            depth += 1
        elif char == ")":
            if depth > 0:
                depth -= 1
        elif char == ";" and depth == 0:
            return Sequence(parse_chain(chain[:index]), parse_chain(chain[index + 1 :]))
    return None


def _split_and_or(chain: str) -> Optional[Node]:
    depth = 0
    for index, char in enumerate(chain):
        if char == "(":
            depth += 1
        elif char == ")":
            if depth > 0:
                depth -= 1
        elif depth == 0 and chain.startswith(("&&", "||"), index):
            operator = chain[index : index + 2]
            return AndOr(
                parse_chain(chain[:index]),
                operator,
                parse_chain(chain[index + 2 :]),
            )
    return None


def _split_pipeline(chain: str) -> Optional[Node]:
    depth = 0
    index = len(chain) - 1
    while index >= 0:
        char = chain[index]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
        elif char == "|" and depth == 0:
            if index > 0 and chain[index - 1] == "|":
                index -= 1
            else:
                left = parse_chain(chain[:index])
                right = parse_chain(chain[index + 1 :])
                if isinstance(left, Pipeline):
                    return Pipeline(left.stages + (right,))
                return Pipeline((left, right))
        index -= 1
    return None


def _split_redirect(chain: str) -> Optional[Node]:
    depth = 0
    index = len(chain) - 1
    while index >= 0:
        char = chain[index]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
        elif depth == 0 and char in "<>":
            return _build_redirect(chain, index)
        index -= 1
    return None


def _build_redirect(chain: str, op_end: int) -> Redirect:
    op_start = op_end
    if chain[op_end] == "<":
        mode = RedirectMode.READ
    elif op_end > 0 and chain[op_end - 1] == ">":
        op_start -= 1
        mode = RedirectMode.APPEND
    elif op_end > 0 and chain[op_end - 1] == "<":
        op_start -= 1
        mode = RedirectMode.READ_WRITE
    else:
        mode = RedirectMode.WRITE

    target = chain[op_end + 1 :].strip()
    fd = mode.default_fd
    cut = op_start

    num_start = op_start
    while num_start > 0 and chain[num_start - 1] in _DIGITS:
        num_start -= 1
    if (
        num_start < op_start
        and op_start - num_start <= _MAX_FD_DIGITS
        and (num_start == 0 or chain[num_start - 1].isspace())
    ):
        fd = int(chain[num_start:op_start])
        cut = num_start

    return Redirect(parse_chain(chain[:cut]), fd, target, mode)


def _parse_simple(chain: str) -> Node:
    command = chain.strip()
    if not command:
        return Empty()

    if command.startswith("!"):
        return Negate(parse_chain(command[1:]))

    if command.startswith("("):
        if len(command) > 1 and command.endswith(")"):
            return Subshell(parse_chain(command[1:-1]))
        return Malformed(MISSING_PAREN)

    return Simple(tuple(tokenize(command)))
