# src/dcmna_core/report.py
"""
Plain-text export of an analysis outcome.

The report lists every recorded step in order (title, rule, description and
payload lines), then the final results table and a verification summary. A
singular outcome is exported with its partial trace and the failure reason.
"""
import logging
from datetime import datetime
from typing import List, Optional

from .simulation.results import AnalysisFailure, AnalysisOutcome, AnalysisResult

logger = logging.getLogger(__name__)

REPORT_WIDTH = 67
_HEAVY_RULE = "═" * REPORT_WIDTH
_LIGHT_RULE = "─" * REPORT_WIDTH


def format_value(value: float, unit: str) -> str:
    """
    Formats a physical quantity for display with 4 decimals.

    Currents (``'A'`` or ``'mA'``) are shown in mA when their magnitude is below
    1 mA and in A otherwise. Any other unit is appended verbatim.
    """
    if unit in ('A', 'mA'):
        in_amperes = value / 1000 if unit == 'mA' else value
        if abs(in_amperes) < 0.001:
            return f"{in_amperes * 1000:.4f} mA"
        return f"{in_amperes:.4f} A"
    return f"{value:.4f} {unit}"


def _banner(title: str) -> List[str]:
    return [_HEAVY_RULE, title.center(REPORT_WIDTH).rstrip(), _HEAVY_RULE, ""]


def render_report(outcome: AnalysisOutcome, *, generated_at: Optional[datetime] = None) -> str:
    """
    Renders ``outcome`` as a plain-text report.

    Args:
        outcome: An ``AnalysisResult`` or ``AnalysisFailure`` from ``run_analysis``.
        generated_at: Optional timestamp printed in the header. Omitted when None,
                      so the same outcome always renders to the same text.
    """
    lines: List[str] = _banner("COMPLETE DC CIRCUIT ANALYSIS")
    lines.append(f"Circuit: {outcome.circuit_name}")
    if isinstance(outcome, AnalysisResult):
        lines.append(f"Method: {outcome.method.value} (solved with Modified Nodal Analysis)")
    if generated_at is not None:
        lines.append(f"Date: {generated_at.isoformat(sep=' ', timespec='seconds')}")
    lines.append("")
    lines += _banner("STEP-BY-STEP DERIVATION")

    for step in outcome.steps:
        lines.append(step.title)
        lines.append(_LIGHT_RULE)
        lines.append("")
        lines.append(step.description)
        lines.append("")
        payload_lines = step.render_lines()
        if payload_lines:
            lines += payload_lines
            lines.append("")

    if isinstance(outcome, AnalysisFailure):
        lines += _banner("ANALYSIS FAILED")
        lines.append(outcome.reason)
        lines.append("")
        logger.debug(f"Rendered failure report for '{outcome.circuit_name}' ({len(outcome.steps)} steps).")
        return "\n".join(lines)

    lines += _banner("FINAL RESULTS TABLE")
    lines.append(f"{'ID':<8}{'Type':<18}{'Voltage':<16}{'Current':<16}Power")
    lines.append(_LIGHT_RULE)
    for res in outcome.component_results:
        lines.append(
            f"{res.component_id:<8}{res.kind.value:<18}"
            f"{format_value(res.voltage, 'V'):<16}{format_value(res.current, 'A'):<16}"
            f"{format_value(res.power, 'W')}"
        )
    lines.append("")

    balance = outcome.power_balance
    lines += _banner("VERIFICATION SUMMARY")
    lines.append(f"Power supplied:   {format_value(balance.supplied, 'W')}")
    lines.append(f"Power dissipated: {format_value(balance.dissipated, 'W')}")
    lines.append(f"Difference:       {balance.difference:.6f} W (tolerance {balance.tolerance} W)")
    if balance.is_balanced:
        lines.append("PASS: the energy balance of the circuit is satisfied.")
    else:
        lines.append("CHECK: the energy balance is not met within tolerance.")
    lines.append("")
    lines.append(_HEAVY_RULE)

    logger.debug(f"Rendered report for '{outcome.circuit_name}' ({len(outcome.steps)} steps).")
    return "\n".join(lines)
