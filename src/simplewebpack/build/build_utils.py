"""Build utilities for simple-webpack.

This module provides helpers for printing asset lines and build reports.
"""

from typing import Optional

from .stats import AssetStat, Report, SizeClass

# ANSI color codes
CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
WHITE = "\033[97m"
RESET = "\033[0m"

SIZE_COLORS = {
    SizeClass.OK: GREEN,
    SizeClass.NOTICE: YELLOW,
    SizeClass.ALERT: RED,
}


def format_bytes(size: int) -> str:
    """Human readable byte size (e.g. '1.50 KiB')."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KiB"
    return f"{size / (1024 * 1024):.2f} MiB"


def format_duration(seconds: Optional[float]) -> str:
    """Human readable duration (e.g. '1.234s' or '850ms')."""
    if seconds is None:
        return "n/a"
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.3f}s"


class ReportPrinter:
    """Utility class for printing asset lines and build reports."""

    @staticmethod
    def format_asset(stat: AssetStat, extra_stats: bool = False, color: bool = True) -> str:
        """
        Format one asset line.

        Args:
            stat: Graded asset
            extra_stats: Include the colored size block
            color: Emit ANSI color codes

        Returns:
            Line like "- main           [ Output:   1.50 KiB ] ./main.js"
        """
        def paint(text: str, code: str) -> str:
            return f"{code}{text}{RESET}" if color else text

        parts = ["- " + ", ".join(stat.asset.chunk_names).ljust(14)]

        if extra_stats:
            block = "["
            if stat.asset.size:
                size_text = format_bytes(stat.asset.size).rjust(11)
                block += " Output: " + paint(size_text, SIZE_COLORS[stat.size_class])
            block += " ]"
            parts.append(block)
        else:
            parts.append(">")

        parts.append(paint("./" + stat.asset.name, WHITE))
        return " ".join(parts)

    @staticmethod
    def print_report(report: Optional[Report], extra_stats: bool = True, color: bool = True) -> None:
        """
        Print a build report in a formatted display.

        Args:
            report: Build report (None to skip printing)
            extra_stats: Include size blocks in asset lines
            color: Emit ANSI color codes
        """
        if not report:
            return

        for notice in report.notices:
            print(notice)

        files = f"Sources: {report.source_count}"
        if report.output_count is not None:
            files += f"  Outputs: {report.output_count}"

        print("Overview:")
        print(f"  Build:    {report.build_hash or 'n/a'}")
        print(f"  Files:    {files}")
        print(f"  Time:     {format_duration(report.total_time)}")
        print(f"  Webpack:  {format_duration(report.engine_time)}")

        if report.assets:
            print()
            print("Asset output details:")
            for stat in report.assets:
                print("  " + ReportPrinter.format_asset(stat, extra_stats=extra_stats, color=color))

        if report.warnings:
            print()
            print("Warnings:")
            print(report.warnings)
