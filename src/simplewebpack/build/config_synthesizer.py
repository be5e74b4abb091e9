"""
Webpack configuration synthesis.

This module assembles the webpack configuration for a run from the resolved
source, target and entry map:
- mode, context, entry and output (with the production .min suffix)
- the fixed eslint plugin and babel transform rule
- optional devtool, terser keep-names minimizer and bundle analyzer
- the caller's extension, applied last and without validation
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..config.settings import RunSettings
from ..errors import ConfigError
from .entry_mapper import EntryMap
from .extension import Extension, Mutator, Overrides
from .source_resolver import SourceDescriptor
from .target_resolver import TargetDescriptor

logger = logging.getLogger(__name__)

BuildConfig = Dict[str, Any]

ANALYZER_MODES = {"static", "json", "disabled"}


@dataclass(frozen=True)
class PluginSpec:
    """A webpack plugin, instantiated as new (require(module)[export])(options)."""

    module: str
    options: Mapping[str, Any] = field(default_factory=dict)
    export: Optional[str] = None


@dataclass(frozen=True)
class TransformRule:
    """A module rule applying a loader to files matching a regular expression."""

    test: str
    loader: str
    options: Mapping[str, Any] = field(default_factory=dict)
    exclude: Optional[str] = None


@dataclass(frozen=True)
class AnalyzerOptions:
    """webpack-bundle-analyzer settings."""

    mode: str = "static"
    generate_stats_file: bool = False
    default_sizes: str = "gzip"


@dataclass(frozen=True)
class SynthesisOptions:
    """Caller options for config synthesis.

    Attributes:
        public_path: webpack output.publicPath
        extension: Config extension applied last
        devtool: webpack devtool (source map style)
        minify: Allow minification in production
        keep_names: Keep class and function names when minifying
        analyzer: Attach the bundle analyzer plugin
    """

    public_path: Optional[str] = None
    extension: Optional[Extension] = None
    devtool: Optional[str] = None
    minify: bool = True
    keep_names: bool = False
    analyzer: Optional[AnalyzerOptions] = None


def eslint_plugin() -> PluginSpec:
    return PluginSpec("eslint-webpack-plugin", {"fix": True})


def babel_rule() -> TransformRule:
    return TransformRule(
        test=r"\.m?js$",
        loader="babel-loader",
        options={"presets": ["@babel/preset-env"]},
    )


class ConfigSynthesizer:
    """
    Assembles webpack configurations.

    Example usage:
        synthesizer = ConfigSynthesizer(RunSettings(mode=BuildMode.PRODUCTION))
        config = synthesizer.synthesize(source, target, entry)
        config["output"]["filename"]  # "[name].min.js"
    """

    def __init__(self, settings: RunSettings):
        self.settings = settings

    def synthesize(
        self,
        source: SourceDescriptor,
        target: TargetDescriptor,
        entry: EntryMap,
        options: Optional[SynthesisOptions] = None,
        context: Any = None,
    ) -> BuildConfig:
        """
        Build the webpack configuration.

        Args:
            source: Resolved source
            target: Resolved target
            entry: Entry map
            options: Synthesis options
            context: Object passed to mutator extensions as fourth argument

        Returns:
            Mutable webpack configuration dictionary

        Raises:
            ConfigError: If the analyzer mode is not supported
        """
        options = options or SynthesisOptions()
        production = self.settings.production
        minimize = production and options.minify

        config: BuildConfig = {
            "mode": self.settings.mode.value,
            "context": str(source.root),
            "entry": {
                name: list(value) if isinstance(value, tuple) else value
                for name, value in entry.items()
            },
            "output": self._get_output(target, options),
            "plugins": [eslint_plugin()],
            "module": {"rules": [babel_rule()]},
            "optimization": {"minimize": minimize},
        }

        if options.devtool:
            config["devtool"] = options.devtool

        if minimize and options.keep_names:
            config["optimization"]["minimizer"] = [
                PluginSpec(
                    "terser-webpack-plugin",
                    {"terserOptions": {"keep_classnames": True, "keep_fnames": True}},
                )
            ]

        if options.analyzer:
            config["plugins"].append(self._get_analyzer(options.analyzer))

        if options.extension is not None:
            self._apply_extension(config, options.extension, source, target, context if context is not None else self)

        return config

    def _get_output(self, target: TargetDescriptor, options: SynthesisOptions) -> Dict[str, Any]:
        output: Dict[str, Any] = {
            "filename": "[name]" + (".min" if self.settings.production else "") + ".js",
            "path": str(target.resolved),
        }
        if options.public_path:
            output["publicPath"] = options.public_path
        return output

    @staticmethod
    def _get_analyzer(analyzer: AnalyzerOptions) -> PluginSpec:
        if analyzer.mode == "server":
            raise ConfigError('Bundle analyzer mode "server" is not supported')
        if analyzer.mode not in ANALYZER_MODES:
            raise ConfigError(f"Unknown bundle analyzer mode: {analyzer.mode}")
        return PluginSpec(
            "webpack-bundle-analyzer",
            {
                "analyzerMode": analyzer.mode,
                "generateStatsFile": analyzer.generate_stats_file,
                "defaultSizes": analyzer.default_sizes,
            },
            export="BundleAnalyzerPlugin",
        )

    @staticmethod
    def _apply_extension(
        config: BuildConfig,
        extension: Extension,
        source: SourceDescriptor,
        target: TargetDescriptor,
        context: Any,
    ) -> None:
        if isinstance(extension, Mutator):
            logger.debug("Applying config mutator %r", extension.func)
            extension.func(config, source, target, context)
        elif isinstance(extension, Overrides):
            logger.debug("Applying config overrides: %s", ", ".join(extension.values))
            config.update(extension.values)
