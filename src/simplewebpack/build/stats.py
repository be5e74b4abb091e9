"""
Build statistics.

Turns a successful compile result into a Report with size-graded assets.
Asset sizes are graded against three ascending limits:
    size <= first limit   -> ok
    size >  third limit   -> alert
    anything in between   -> notice
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..config.settings import RunSettings
from .engine import CompileStats

logger = logging.getLogger(__name__)

KIB = 1024
DEFAULT_THRESHOLDS: Tuple[int, int, int] = (200 * KIB, 400 * KIB, 500 * KIB)


class SizeClass(str, Enum):
    """Asset size grade."""

    OK = "ok"
    NOTICE = "notice"
    ALERT = "alert"


@dataclass(frozen=True)
class Asset:
    """One compiled output file."""

    name: str
    size: int
    chunk_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AssetStat:
    """An asset with its size grade."""

    asset: Asset
    size_class: SizeClass


@dataclass
class Report:
    """Build statistics report."""

    build_hash: Optional[str]
    source_count: int
    output_count: Optional[int]     # Only set when it differs from source_count
    total_time: float               # Seconds, whole run
    engine_time: Optional[float]    # Seconds, webpack's own compile time
    assets: List[AssetStat] = field(default_factory=list)
    warnings: Optional[str] = None
    notices: List[str] = field(default_factory=list)


def resolve_thresholds(values: Optional[Sequence[int]]) -> Tuple[Tuple[int, int, int], Optional[str]]:
    """
    Validate size limits.

    Args:
        values: Three strictly ascending byte limits, or None for the defaults

    Returns:
        Tuple of (limits to use, notice text when falling back to the defaults)
    """
    if values is None:
        return DEFAULT_THRESHOLDS, None

    limits = list(values)
    if len(limits) == 3 and limits[0] > 0 and limits[0] < limits[1] < limits[2]:
        return (int(limits[0]), int(limits[1]), int(limits[2])), None

    notice = (
        "Using default size limits of 200/400/500 KiB, size limits must be "
        "3 ascending KiB values"
    )
    return DEFAULT_THRESHOLDS, notice


class StatsAggregator:
    """
    Builds Reports from compile results.

    Example usage:
        aggregator = StatsAggregator(settings, thresholds=(100 * 1024, 200 * 1024, 300 * 1024))
        report = aggregator.aggregate(result.payload, result.elapsed)
    """

    def __init__(self, settings: RunSettings, thresholds: Optional[Sequence[int]] = None):
        """
        Initialize stats aggregator.

        Args:
            settings: Run settings; verbose and strict decide what was already printed
            thresholds: Three ascending byte limits (invalid limits fall back to defaults)
        """
        self.settings = settings
        self.thresholds, notice = resolve_thresholds(thresholds)
        self.notices: List[str] = []
        if notice:
            logger.info(notice)
            self.notices.append(notice)

    def classify(self, size: int) -> SizeClass:
        """Grade an asset size."""
        ok_limit, _notice_limit, alert_limit = self.thresholds
        if size <= ok_limit:
            return SizeClass.OK
        if size > alert_limit:
            return SizeClass.ALERT
        return SizeClass.NOTICE

    @staticmethod
    def extract_assets(payload: CompileStats) -> List[Asset]:
        """Read assets from a compile result."""
        info = payload.to_json({"all": False, "assets": True})
        return [
            Asset(
                name=item["name"],
                size=item["size"],
                chunk_names=tuple(item["chunkNames"]),
            )
            for item in info["assets"]
        ]

    def grade(self, assets: Sequence[Asset]) -> List[AssetStat]:
        return [AssetStat(asset=asset, size_class=self.classify(asset.size)) for asset in assets]

    def aggregate(self, payload: CompileStats, elapsed: float) -> Report:
        """
        Build the report for a successful compile.

        The per-asset breakdown is left out in verbose mode, where every asset
        was already printed. Warnings are included only when they exist and
        were not already printed (which happens in verbose or strict mode).

        Args:
            payload: Compile result
            elapsed: Total run time in seconds

        Returns:
            Report
        """
        info = payload.to_json({
            "all": False,
            "assets": True,
            "entrypoints": True,
            "hash": True,
            "timings": True,
            "warnings": True,
        })

        assets = self.extract_assets(payload)
        source_count = len(info["entrypoints"])
        engine_time = info.get("time")

        report = Report(
            build_hash=info.get("hash"),
            source_count=source_count,
            output_count=len(assets) if len(assets) != source_count else None,
            total_time=elapsed,
            engine_time=engine_time / 1000.0 if engine_time is not None else None,
            notices=list(self.notices),
        )

        if not self.settings.verbose:
            report.assets = self.grade(assets)

        warnings_shown = self.settings.verbose or self.settings.strict
        if payload.has_warnings() and not warnings_shown:
            report.warnings = payload.warnings_text()

        return report
