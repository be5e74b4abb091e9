"""Webpack engine adapter.

This module runs webpack as a Node.js subprocess and wraps its JSON stats.

Design:
    - The synthesized config is rendered to a temporary webpack.config.js
    - webpack runs once via asyncio subprocess with --json, no retry, no timeout
    - Invocation problems raise EngineInvocationError; compile errors are
      reported through CompileStats, never raised
    - If the host is interrupted mid-compile the webpack process tree is
      terminated with psutil before the interrupt propagates
"""

import asyncio
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

import psutil

from .config_synthesizer import BuildConfig
from .config_writer import ConfigRenderError, render_config

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("npx", "webpack")


class EngineInvocationError(Exception):
    """Raised when webpack cannot be run or its output cannot be read."""
    pass


def _message(item: Any) -> str:
    """Normalize a webpack warning/error entry (string or object) to text."""
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        message = str(item.get("message", "")).strip()
        location = item.get("moduleName") or item.get("file")
        if location and message:
            return f"{location}\n{message}"
        return message or json.dumps(dict(item))
    return str(item)


class CompileStats:
    """Compile result of one webpack run, backed by webpack's JSON stats.

    Attributes:
        data: Raw stats dictionary as printed by `webpack --json`
    """

    def __init__(self, data: Mapping[str, Any]):
        self.data = dict(data)

    def _entries(self, key: str) -> List[str]:
        entries = list(self.data.get(key) or [])
        for child in self.data.get("children") or []:
            entries.extend(child.get(key) or [])
        return [_message(entry) for entry in entries]

    @property
    def errors(self) -> List[str]:
        return self._entries("errors")

    @property
    def warnings(self) -> List[str]:
        return self._entries("warnings")

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_json(self, options: Optional[Mapping[str, bool]] = None) -> Dict[str, Any]:
        """
        Select parts of the stats, like webpack's stats.toJson(options).

        Args:
            options: Flags for assets, warnings, errors, entrypoints, hash and
                timings; `all` sets the default for unspecified flags

        Returns:
            Dictionary with the selected keys
        """
        options = dict(options or {})
        default = options.get("all", True)

        def wanted(key: str) -> bool:
            return bool(options.get(key, default))

        info: Dict[str, Any] = {}
        if wanted("assets"):
            info["assets"] = [
                {
                    "name": asset.get("name", ""),
                    "size": int(asset.get("size") or 0),
                    "chunkNames": [str(name) for name in asset.get("chunkNames") or []],
                }
                for asset in self.data.get("assets") or []
            ]
        if wanted("warnings"):
            info["warnings"] = self.warnings
        if wanted("errors"):
            info["errors"] = self.errors
        if wanted("entrypoints"):
            info["entrypoints"] = dict(self.data.get("entrypoints") or {})
        if wanted("hash"):
            info["hash"] = self.data.get("hash")
        if wanted("timings"):
            info["time"] = self.data.get("time")
        return info

    def to_string(self, options: Optional[Mapping[str, bool]] = None) -> str:
        """
        Format diagnostics as text.

        Args:
            options: errors/warnings flags (both default to True)

        Returns:
            Multi-line diagnostic text
        """
        options = dict(options or {})
        blocks = []
        if options.get("errors", True):
            blocks.extend(f"ERROR in {error}" for error in self.errors)
        if options.get("warnings", True):
            blocks.extend(f"WARNING in {warning}" for warning in self.warnings)
        return "\n\n".join(blocks)

    def warnings_text(self) -> str:
        """Warnings without a heading line."""
        return "\n\n".join(self.warnings).strip()


class Engine(Protocol):
    """Compile engine contract."""

    async def compile(self, config: BuildConfig) -> CompileStats:
        ...


class WebpackEngine:
    """
    Runs webpack through its command line interface.

    Example usage:
        engine = WebpackEngine(work_dir=Path.cwd())
        stats = await engine.compile(config)
        if stats.has_errors():
            print(stats.to_string())
    """

    def __init__(self, command: Optional[Sequence[str]] = None, work_dir: Optional[Path] = None):
        """
        Initialize webpack engine.

        Args:
            command: webpack command line (default: npx webpack)
            work_dir: Directory webpack runs in; node modules resolve from here
        """
        self.command = list(command or DEFAULT_COMMAND)
        self.work_dir = Path(work_dir) if work_dir else None

    async def compile(self, config: BuildConfig) -> CompileStats:
        """
        Compile once with the given configuration.

        Args:
            config: Synthesized webpack configuration

        Returns:
            CompileStats, which may report compile errors

        Raises:
            EngineInvocationError: If webpack cannot be run or returns no stats
        """
        try:
            source = render_config(config)
        except ConfigRenderError as e:
            raise EngineInvocationError(f"Invalid webpack configuration: {e}") from e

        with tempfile.TemporaryDirectory(prefix="simplewebpack-") as tmp:
            config_path = Path(tmp) / "webpack.config.js"
            config_path.write_text(source, encoding="utf-8")
            cmd = self.command + ["--config", str(config_path), "--json"]
            logger.debug("Running %s", " ".join(cmd))
            returncode, stdout, stderr = await self._run(cmd)

        try:
            data = json.loads(stdout)
        except ValueError as e:
            detail = stderr.strip() or stdout.strip()
            raise EngineInvocationError(
                f"webpack exited with code {returncode} without stats output\n{detail}"
            ) from e

        if not isinstance(data, dict):
            raise EngineInvocationError(f"Unexpected webpack stats output: {type(data).__name__}")

        if stderr.strip():
            logger.debug("webpack stderr:\n%s", stderr.strip())
        return CompileStats(data)

    async def _run(self, cmd: List[str]) -> Tuple[Optional[int], str, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.work_dir) if self.work_dir else None,
            )
        except OSError as e:
            raise EngineInvocationError(f"Failed to start webpack ({cmd[0]}): {e}") from e

        try:
            stdout, stderr = await proc.communicate()
        except (asyncio.CancelledError, KeyboardInterrupt):
            await asyncio.to_thread(terminate_process_tree, proc.pid)
            raise

        return (
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )


def terminate_process_tree(pid: int) -> int:
    """
    Terminate a process and all of its children.

    Blocks for up to 3 seconds waiting for the processes to exit, so async
    callers run it in a worker thread.

    Args:
        pid: Root process id

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(pid)
        processes = root.children(recursive=True) + [root]
    except psutil.NoSuchProcess:
        return 0

    killed = 0
    for proc in processes:
        try:
            proc.terminate()
            killed += 1
        except psutil.NoSuchProcess:
            pass

    _gone, alive = psutil.wait_procs(processes, timeout=3)
    for proc in alive:
        try:
            proc.kill()
            logger.warning("Force killed webpack process %s", proc.pid)
        except psutil.NoSuchProcess:
            pass

    return killed
