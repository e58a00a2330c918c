"""Project config template written by `chronolint init`.

The template only lists the options users reasonably change. Everything
else keeps its default and can still be set by hand (see models.py).
"""

from pathlib import Path

import yaml

from chronolint.config.models import ConventionsConfig, LintConfig

TEMPLATE_HEADER = """\
# chronolint configuration
# Environment variables override this file: CHRONOLINT__LINT__STRICT=true
"""


def _commented(data: dict[str, object]) -> list[str]:
    dumped = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return [f"# {line}" if line.strip() else "#" for line in dumped.rstrip().splitlines()]


def render_user_config(
    lint: LintConfig | None = None,
    conventions: ConventionsConfig | None = None,
) -> str:
    """Render the config template.

    Lint settings are written active. Convention lists are written as
    comments so defaults keep tracking new releases until a user opts in.
    """
    lint_cfg = lint or LintConfig()
    conv_cfg = conventions or ConventionsConfig()

    lines = [TEMPLATE_HEADER]

    lines.append("# Run behaviour. strict: warnings also fail the run.")
    lines.append(
        yaml.safe_dump(
            {
                "lint": {
                    "strict": lint_cfg.strict,
                    "format": lint_cfg.format,
                    "disabled_rules": list(lint_cfg.disabled_rules),
                    "max_workers": lint_cfg.max_workers,
                }
            },
            default_flow_style=False,
            sort_keys=False,
        ).rstrip()
    )
    lines.append("")

    lines.append("# Naming conventions. Uncomment a list to replace its default.")
    lines.extend(
        _commented(
            {
                "conventions": {
                    "scheduling_names": conv_cfg.scheduling_names,
                    "history_suffixes": conv_cfg.history_suffixes,
                    "event_verbs": conv_cfg.event_verbs,
                    "chronology_sequences": conv_cfg.chronology_sequences,
                }
            }
        )
    )
    lines.append("")
    return "\n".join(lines)


def write_user_config(path: Path, *, force: bool = False) -> bool:
    """Write the config template.

    Returns:
        False when the file exists and force is not set, True otherwise.
    """
    if path.exists() and not force:
        return False
    path.write_text(render_user_config(), encoding="utf-8")
    return True
