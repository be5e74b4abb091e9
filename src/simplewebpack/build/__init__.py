"""
Build system components for simple-webpack.

This module provides the build pipeline including:
- Source and target resolution
- Entry mapping and webpack config synthesis
- Compile orchestration
- Build statistics
"""

from .config_synthesizer import (
    AnalyzerOptions,
    BuildConfig,
    ConfigSynthesizer,
    PluginSpec,
    SynthesisOptions,
    TransformRule,
)
from .engine import CompileStats, Engine, EngineInvocationError, WebpackEngine
from .entry_mapper import EntryMap, EntryMapper, EntryOptions
from .extension import Extension, Mutator, Overrides, load_extension
from .filesystem import FileSystem
from .orchestrator import BuildOrchestrator, BuildResult, BuildState, Failure, Success
from .pipeline import BuildPipeline, BuildSetup, RunOptions
from .read_filter import ReadFilter
from .source_resolver import ReadMode, ReadOptions, SourceDescriptor, SourceResolver
from .stats import Asset, Report, SizeClass, StatsAggregator
from .target_resolver import TargetDescriptor, TargetResolver

__all__ = [
    "AnalyzerOptions",
    "Asset",
    "BuildConfig",
    "BuildOrchestrator",
    "BuildPipeline",
    "BuildResult",
    "BuildSetup",
    "BuildState",
    "CompileStats",
    "ConfigSynthesizer",
    "Engine",
    "EngineInvocationError",
    "EntryMap",
    "EntryMapper",
    "EntryOptions",
    "Extension",
    "Failure",
    "FileSystem",
    "Mutator",
    "Overrides",
    "PluginSpec",
    "ReadFilter",
    "ReadMode",
    "ReadOptions",
    "Report",
    "RunOptions",
    "SizeClass",
    "SourceDescriptor",
    "SourceResolver",
    "StatsAggregator",
    "Success",
    "SynthesisOptions",
    "TargetDescriptor",
    "TargetResolver",
    "TransformRule",
    "WebpackEngine",
    "load_extension",
]
