#!/usr/bin/env python3
from typing import Optional

from loguru import logger

from ..core.state import ShellState
from ..history import CommandHistory
from ..ui import UIManager
from .builtins import BuiltinDispatcher
from .parser import (
    AndOr,
    Empty,
    Malformed,
    Negate,
    Node,
    Pipeline,
    Redirect,
    Sequence,
    Simple,
    Subshell,
    parse_chain,
)
from .process import ProcessOrchestrator


class ChainExecutor:
    def __init__(
        self,
        state: ShellState,
        ui: UIManager,
        history: Optional[CommandHistory] = None,
    ) -> None:
        self.state = state
        self.ui = ui
        self.history = history or CommandHistory(ui)
        self.orchestrator = ProcessOrchestrator(ui)
        self.builtins = BuiltinDispatcher(state, self.history, self.orchestrator, ui)

    def execute(self, chain: str) -> int:
        node = parse_chain(chain)
        logger.debug("executor.parsed chain={!r} node={}", chain, node)
        return self.run(node)

    def run(self, node: Node) -> int:
        if isinstance(node, Sequence):
            self.run(node.left)
            return self.run(node.right)

        if isinstance(node, AndOr):
            return self._run_and_or(node)

        if isinstance(node, Pipeline):
            return self.orchestrator.pipeline(node.stages, self.run)

        if isinstance(node, Redirect):
            return self.orchestrator.redirect(node, self.run)

        if isinstance(node, Negate):
            return 1 if self.run(node.body) == 0 else 0

        if isinstance(node, Subshell):
            return self.orchestrator.subshell(node.body, self.run)

        if isinstance(node, Malformed):
            self.ui.report(f"pish: {node.message}")
            return 2

        if isinstance(node, Simple):
            return self._run_simple(node)

        if isinstance(node, Empty):
            return 0

        raise TypeError(f"unknown command node: {node!r}")

    def _run_and_or(self, node: AndOr) -> int:
        status = self.run(node.left)
        if node.operator == "&&":
            return self.run(node.right) if status == 0 else status
        return self.run(node.right) if status != 0 else status

    def _run_simple(self, node: Simple) -> int:
        argv = list(node.argv)
        if not argv:
            return 0

        status = self.builtins.dispatch(argv)
        if status is None:
            status = self.orchestrator.spawn(argv)

        self.state.last_status = status
        return status
