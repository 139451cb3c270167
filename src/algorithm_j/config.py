"""Session configuration shared by the command line and the REPL."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import logging
import os

from .context import Context
from .parser import parse_binding, parse_context
from .prelude import prelude_context

LOG_LEVEL_ENV = "ALGORITHM_J_LOG"


@dataclass
class Config:
    """Behaviour flags for an inference session."""
    use_prelude: bool = True
    ascii: bool = False
    normalize: bool = True
    verbose: bool = False
    color: bool = True
    bindings: List[str] = field(default_factory=list)
    context_file: Optional[str] = None

    def initial_context(self) -> Context:
        """Build the starting context.

        The prelude comes first, then each ``--bind`` in order, then the
        bindings read from `context_file`. Raises LexError or ParseError on
        malformed bindings.
        """
        ctxt = prelude_context() if self.use_prelude else Context()
        for source in self.bindings:
            name, scheme = parse_binding(source)
            ctxt = ctxt.extend(name, scheme)
        if self.context_file:
            with open(self.context_file, 'r', encoding='utf-8') as f:
                ctxt = ctxt.merge(parse_context(f.read(), self.context_file))
        return ctxt


def configure_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Set up the `algorithm_j` logger.

    An explicit `level`, then the ALGORITHM_J_LOG environment variable, then
    the verbose flag decide the threshold.
    """
    level_name = level or os.environ.get(LOG_LEVEL_ENV) or ("DEBUG" if verbose else "WARNING")
    numeric = logging.getLevelName(level_name.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logger = logging.getLogger("algorithm_j")
    logger.setLevel(numeric)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
