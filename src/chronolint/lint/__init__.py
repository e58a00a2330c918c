"""Lint module - rules, engine, pipeline and reporting."""

from chronolint.lint.definitions import default_rules
from chronolint.lint.models import Finding, Severity, SourceResult, Summary
from chronolint.lint.ops import classify, lint, lint_batch
from chronolint.lint.report import exit_code, render_json, render_text, sort_findings, summarize
from chronolint.lint.rules import Rule, RuleScope, RuleSet, evaluate

__all__ = [
    "Finding",
    "Rule",
    "RuleScope",
    "RuleSet",
    "Severity",
    "SourceResult",
    "Summary",
    "classify",
    "default_rules",
    "evaluate",
    "exit_code",
    "lint",
    "lint_batch",
    "render_json",
    "render_text",
    "sort_findings",
    "summarize",
]
