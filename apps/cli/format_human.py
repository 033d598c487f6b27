"""Human-readable replay summary rendering for CLI output."""

from __future__ import annotations

from maskengine.trace.models import ReplayReport, ReplayStep

_MAX_LISTED_STEPS = 5


def render_replay_summary(report: ReplayReport) -> str:
    """Render one-screen human-readable replay summary."""

    lines: list[str] = []
    lines.append("replay_summary:")
    lines.append(f"mask={report.mask} device={report.device or 'unknown'}")
    lines.append(f"result={'PASSED' if report.passed else 'FAILED'}")
    lines.append(f"steps={len(report.steps)} mismatches={report.mismatch_count}")

    if report.rule_counts:
        top_items = sorted(report.rule_counts.items(), key=lambda item: (-item[1], item[0]))
        rules_text = ", ".join(f"{rule}={count}" for rule, count in top_items)
        lines.append(f"rules: {rules_text}")
    else:
        lines.append("rules: none")

    mismatched = [step for step in report.steps if step.matched is False]
    for step in mismatched[:_MAX_LISTED_STEPS]:
        lines.append(f"mismatch: {_describe_step(step)} expected={step.expected_raw!r}")
    if len(mismatched) > _MAX_LISTED_STEPS:
        lines.append(f"mismatch: ... {len(mismatched) - _MAX_LISTED_STEPS} more")

    if report.accumulated_divergences:
        indexes = ", ".join(str(index) for index in report.accumulated_divergences)
        lines.append(f"accumulated_divergences: {indexes}")
    else:
        lines.append("accumulated_divergences: none")

    lines.append(f"final: raw={report.final_raw!r} display={report.final_display!r}")
    return "\n".join(lines)


def _describe_step(step: ReplayStep) -> str:
    return f"#{step.index} {step.old!r}->{step.new!r} rule={step.rule} raw={step.raw_text!r}"
