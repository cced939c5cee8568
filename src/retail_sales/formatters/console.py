"""Console output formatting for report results."""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from retail_sales.formatters.export import presentable


def format_report(name: str, result: Any) -> str:
    """Render one report result as a titled text block."""
    lines = [name, "=" * len(name)]
    if isinstance(result, pd.DataFrame):
        if result.empty:
            lines.append("(no rows)")
        else:
            with pd.option_context(
                "display.float_format", lambda v: f"{v:,.2f}", "display.width", 200
            ):
                lines.append(presentable(result).to_string(index=False))
    elif result is None:
        lines.append("(no data)")
    elif isinstance(result, (list, tuple, set)):
        lines.append(", ".join(str(v) for v in result) if result else "(none)")
    elif isinstance(result, float):
        lines.append(f"{result:,.2f}")
    else:
        lines.append(str(result))
    return "\n".join(lines)


def format_results(results: Mapping[str, Any]) -> str:
    """Render every result, separated by blank lines."""
    return "\n\n".join(format_report(name, r) for name, r in results.items())
