"""
Build pipeline for simple-webpack runs.

This module coordinates one run, from a source path to a compile result:
- Source and target resolution
- Entry mapping
- Config synthesis (with the caller's extension)
- Compile orchestration under the strict/loose policy
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from ..config.settings import RunSettings
from ..errors import ErrorReporter
from .config_synthesizer import AnalyzerOptions, BuildConfig, ConfigSynthesizer, SynthesisOptions
from .engine import Engine, WebpackEngine
from .entry_mapper import EntryMapper, EntryOptions
from .extension import Extension
from .filesystem import FileSystem
from .orchestrator import BuildOrchestrator, BuildResult
from .read_filter import ReadFilter
from .source_resolver import ReadMode, ReadOptions, SourceDescriptor, SourceResolver
from .target_resolver import TargetDescriptor, TargetResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """Options for one build run.

    Attributes:
        read_mode: Source read mode
        read_filter: Custom source filter (required for recursive mode)
        name: Bundle all sources into one entry with this name
        prepend: Modules placed before the sources in the bundle entry
        public_path: webpack output.publicPath
        extension: Config extension applied after synthesis
        devtool: webpack devtool setting
        minify: Allow minification in production
        keep_names: Keep class and function names when minifying
        analyzer: Attach the bundle analyzer
    """

    read_mode: ReadMode = ReadMode.NONE
    read_filter: Optional[ReadFilter] = None
    name: Optional[str] = None
    prepend: Tuple[str, ...] = field(default_factory=tuple)
    public_path: Optional[str] = None
    extension: Optional[Extension] = None
    devtool: Optional[str] = None
    minify: bool = True
    keep_names: bool = False
    analyzer: Optional[AnalyzerOptions] = None


@dataclass(frozen=True)
class BuildSetup:
    """Everything generated for a run before compiling."""

    options: RunOptions
    source: SourceDescriptor
    target: TargetDescriptor
    config: BuildConfig


class BuildPipeline:
    """
    Runs source-to-bundle builds.

    The pipeline instance is the context object handed to mutator extensions.

    Example usage:
        pipeline = BuildPipeline(RunSettings(mode=BuildMode.PRODUCTION))
        result = asyncio.run(pipeline.run("src", "dist", RunOptions(name="bundle")))
        if result.payload:
            print(len(result.payload.to_json()["assets"]), "assets")
    """

    def __init__(
        self,
        settings: RunSettings,
        engine: Optional[Engine] = None,
        filesystem: Optional[FileSystem] = None,
        reporter: Optional[ErrorReporter] = None,
    ):
        """
        Initialize build pipeline.

        Args:
            settings: Run settings
            engine: Compile engine (defaults to webpack run in the project root)
            filesystem: Filesystem collaborator
            reporter: Error channel
        """
        self.settings = settings
        self.engine = engine or WebpackEngine(work_dir=settings.project_root)
        self.filesystem = filesystem or FileSystem()
        self.reporter = reporter or ErrorReporter(verbose=settings.verbose)

    async def generate_config(
        self,
        source: Union[str, Path],
        target: Union[str, Path],
        options: Optional[RunOptions] = None,
    ) -> BuildSetup:
        """
        Resolve source and target and synthesize the webpack config.

        Args:
            source: Source file or directory
            target: Output directory (created if missing)
            options: Run options

        Returns:
            BuildSetup with the mutable config

        Raises:
            NotFoundError, EmptySourceError, ConfigError, TargetNotADirectoryError:
                On structural misconfiguration, regardless of strict/loose
        """
        options = options or RunOptions()

        source_descriptor = await SourceResolver(self.filesystem).resolve(
            source, ReadOptions(mode=options.read_mode, read_filter=options.read_filter)
        )
        target_descriptor = await TargetResolver(self.filesystem).resolve(target)

        entry = EntryMapper().map(
            source_descriptor,
            EntryOptions(combined_name=options.name, prepend=tuple(options.prepend)),
        )

        config = ConfigSynthesizer(self.settings).synthesize(
            source_descriptor,
            target_descriptor,
            entry,
            SynthesisOptions(
                public_path=options.public_path,
                extension=options.extension,
                devtool=options.devtool,
                minify=options.minify,
                keep_names=options.keep_names,
                analyzer=options.analyzer,
            ),
            context=self,
        )

        return BuildSetup(
            options=options,
            source=source_descriptor,
            target=target_descriptor,
            config=config,
        )

    async def run(
        self,
        source: Union[str, Path],
        target: Union[str, Path],
        options: Optional[RunOptions] = None,
    ) -> BuildResult:
        """
        Execute one build.

        Args:
            source: Source file or directory
            target: Output directory
            options: Run options

        Returns:
            BuildResult whose elapsed time covers the whole run

        Raises:
            SimpleWebpackError: Resolution errors always; CompileError in strict mode
        """
        started_at = time.perf_counter()
        setup = await self.generate_config(source, target, options)

        orchestrator = BuildOrchestrator(self.engine, self.settings, self.reporter)
        result = await orchestrator.compile(setup.config, started_at=started_at)

        logger.debug("Run finished in %.2fs (%s)", result.elapsed, orchestrator.state.value)
        return BuildResult(
            config=result.config,
            outcome=result.outcome,
            elapsed=result.elapsed,
            setup=setup,
        )
