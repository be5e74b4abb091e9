"""
Compile orchestration.

This module invokes the compile engine once for a frozen configuration and
classifies the outcome:
- engine invocation failure -> CompileError
- compile finished with errors -> CompileError with the diagnostic dump
- compile finished without errors (warnings allowed) -> Success

Strict runs raise the CompileError; loose runs report it and return a
BuildResult without compiled payload. Elapsed time is recorded on every path.
"""

import copy
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from ..config.settings import RunSettings
from ..errors import CompileError, ErrorReporter
from .config_synthesizer import BuildConfig
from .engine import CompileStats, Engine, EngineInvocationError

logger = logging.getLogger(__name__)


class BuildState(Enum):
    """Orchestrator state machine."""

    IDLE = "idle"
    INVOKING = "invoking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    FATAL_REPORTED = "fatal_reported"
    SOFT_REPORTED = "soft_reported"


@dataclass(frozen=True)
class Success:
    """Compile finished without errors."""

    payload: CompileStats


@dataclass(frozen=True)
class Failure:
    """Compile failed."""

    cause: CompileError
    fatal: bool


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class BuildResult:
    """Result of one build run."""

    config: BuildConfig
    outcome: Outcome
    elapsed: float
    setup: Any = None

    @property
    def success(self) -> bool:
        return isinstance(self.outcome, Success)

    @property
    def payload(self) -> Optional[CompileStats]:
        """Compiled stats, or None when the compile failed."""
        if isinstance(self.outcome, Success):
            return self.outcome.payload
        return None


class BuildOrchestrator:
    """
    Runs the compile engine and applies the strict/loose failure policy.

    Example usage:
        orchestrator = BuildOrchestrator(WebpackEngine(), RunSettings(strict=False))
        result = await orchestrator.compile(config)
        if result.payload:
            print(result.payload.to_json()["assets"])
    """

    def __init__(
        self,
        engine: Engine,
        settings: RunSettings,
        reporter: Optional[ErrorReporter] = None,
    ):
        """
        Initialize build orchestrator.

        Args:
            engine: Compile engine
            settings: Run settings (strict and verbose are used)
            reporter: Error channel for loose-mode failures
        """
        self.engine = engine
        self.settings = settings
        self.reporter = reporter or ErrorReporter(verbose=settings.verbose)
        self.state = BuildState.IDLE

    async def compile(self, config: BuildConfig, started_at: Optional[float] = None) -> BuildResult:
        """
        Compile once.

        Args:
            config: Webpack configuration; a deep copy is handed to the engine
            started_at: time.perf_counter() value the elapsed time counts from

        Returns:
            BuildResult; on loose failures its payload is None

        Raises:
            CompileError: In strict mode, if the compile fails
        """
        if started_at is None:
            started_at = time.perf_counter()

        frozen = copy.deepcopy(config)
        self.state = BuildState.INVOKING
        outcome = await self._invoke(frozen)
        elapsed = time.perf_counter() - started_at

        result = BuildResult(config=frozen, outcome=outcome, elapsed=elapsed)

        if isinstance(outcome, Success):
            self.state = BuildState.SUCCEEDED
            logger.debug("Compile succeeded in %.2fs", elapsed)
            return result

        self.state = BuildState.FAILED
        outcome.cause.elapsed = elapsed
        outcome.cause.result = result

        if outcome.fatal:
            self.state = BuildState.FATAL_REPORTED
            raise outcome.cause

        self.reporter.report(outcome.cause)
        self.state = BuildState.SOFT_REPORTED
        return result

    async def _invoke(self, config: BuildConfig) -> Outcome:
        fatal = self.settings.strict

        try:
            stats = await self.engine.compile(config)
        except EngineInvocationError as e:
            return Failure(CompileError("Compile error", cause=e), fatal=fatal)

        if stats.has_errors():
            count = len(stats.errors)
            summary = f"Compile error: webpack reported {count} error{'' if count == 1 else 's'}"
            dump = "WebpackStatsInfo:\n" + stats.to_string({"errors": True, "warnings": True})
            return Failure(CompileError(summary, details=dump), fatal=fatal)

        return Success(stats)
