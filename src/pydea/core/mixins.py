"""Text formatting helpers shared by the result summaries."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

REPORT_WIDTH = 72


class ResultSummaryMixin:
    """Building blocks for the plain-text ``summary()`` reports.

    Every helper returns one or more lines without a trailing newline, so a
    report is assembled as a list of strings and joined once.
    """

    @staticmethod
    def _format_header(title: str, width: int = REPORT_WIDTH) -> str:
        """Title centered between two rules."""
        rule = "=" * width
        return f"{rule}\n{title.center(width).rstrip()}\n{rule}"

    @staticmethod
    def _format_section(title: str) -> str:
        """Blank line, title, underline."""
        return f"\n{title}:\n{'-' * (len(title) + 1)}"

    @staticmethod
    def _format_metric(label: str, value: Any, width: int = 44) -> str:
        """
        One ``label ..... value`` row.

        Floats use 4 decimals, or scientific notation when they are tiny
        (epsilon-sized weights and bounds).
        """
        if isinstance(value, bool):
            text = "Yes" if value else "No"
        elif isinstance(value, float):
            text = f"{value:.2e}" if 0 < abs(value) < 1e-3 else f"{value:.4f}"
        elif value is None:
            text = "-"
        else:
            text = str(value)
        fill = "." * max(2, width - len(label) - len(text))
        return f"  {label} {fill} {text}"

    @staticmethod
    def _format_list(items: Sequence[Any], max_items: int = 5, item_name: str = "item") -> str:
        """Numbered list, truncated after `max_items` entries."""
        if len(items) == 0:
            return "  (none)"
        lines = [f"  {n:>2}. {item}" for n, item in enumerate(items[:max_items], start=1)]
        hidden = len(items) - max_items
        if hidden > 0:
            lines.append(f"  ... {hidden} more {item_name}(s)")
        return "\n".join(lines)

    @staticmethod
    def _format_interpretation(value: float, metric_type: str = "efficiency") -> str:
        """
        Plain-language reading of a score.

        Args:
            value: Efficiency score in [0, 1] or percentile in [0, 100]
            metric_type: "efficiency" or "percentile"
        """
        if metric_type == "percentile":
            if value >= 90.0:
                return "Among the top 10% of the reference population"
            if value >= 75.0:
                return "Above the upper quartile"
            if value >= 50.0:
                return "Above the median"
            return "Below the median"

        if value >= 1.0:
            return "On the efficient frontier"
        if value >= 0.9:
            return "Close to the frontier"
        if value >= 0.7:
            return "Moderately efficient"
        return "Dominated by efficient peers"

    @staticmethod
    def _format_footer(computation_time_ms: float, width: int = REPORT_WIDTH) -> str:
        """Computation time followed by a closing rule."""
        if computation_time_ms >= 1000:
            elapsed = f"{computation_time_ms / 1000:.2f} s"
        else:
            elapsed = f"{computation_time_ms:.2f} ms"
        return f"\nComputation Time: {elapsed}\n{'=' * width}"
