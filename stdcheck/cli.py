"""Command-line entry point for the standards compliance checker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import REPORT_FORMATS, Config, load_config
from .errors import ConfigurationError, StdcheckError
from .evaluator import evaluate
from .levels import Level
from .logging_config import setup_logging
from .registry import list_standards, load_standards, normalize_standard_name
from .report import Report, build_report, format_summary_table, render_json, render_markdown
from .target import Target, load_stdin, load_target, target_from_text

logger = logging.getLogger(__name__)

ALL_STANDARDS = "all"
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stdcheck",
        description="Check a source file or document against engineering standards.",
    )
    parser.add_argument(
        "target",
        nargs="?",
        help="File to check, or '-' to read from stdin.",
    )
    parser.add_argument(
        "--text",
        default=None,
        help="Check this string instead of a file.",
    )
    parser.add_argument(
        "--standard",
        "-s",
        dest="standards",
        action="append",
        default=[],
        help=f"Standard to apply (repeatable, '{ALL_STANDARDS}' for every known standard).",
    )
    parser.add_argument(
        "--rules-dir",
        dest="rules_dirs",
        action="append",
        default=[],
        help="Extra directory of <standard>.yaml rule files (repeatable).",
    )
    parser.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default=None,
        help="Report format (defaults to json).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the report (e.g., artifacts/compliance.json).",
    )
    parser.add_argument(
        "--fail-on",
        choices=[level.value for level in Level],
        default=None,
        help="Lowest rule level whose violation fails the run (defaults to MUST).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file (defaults to ./.stdcheck.yaml when present).",
    )
    parser.add_argument(
        "--list-standards",
        action="store_true",
        help="List available standards and exit.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Suppress the console summary.")
    return parser


def resolve_standards(requested: Sequence[str], rules_dirs: Sequence[str]) -> List[str]:
    if not requested:
        raise ConfigurationError("no standard selected; pass --standard or set 'standards' in the config file")
    if any(name.lower() == ALL_STANDARDS for name in requested):
        return list_standards(rules_dirs)
    # Keep first occurrence; repeats would collide on rule ids.
    return list(dict.fromkeys(normalize_standard_name(name) for name in requested))


def resolve_target(target_arg: Optional[str], text: Optional[str]) -> Target:
    if text is not None:
        if target_arg:
            raise ConfigurationError("pass either a target file or --text, not both")
        return target_from_text(text)
    if not target_arg:
        raise ConfigurationError("no target given; pass a file path, '-' or --text")
    if target_arg == "-":
        return load_stdin()
    return load_target(target_arg)


def run_check(
    target: Target,
    standards: Sequence[str],
    rules_dirs: Sequence[str] = (),
    disabled: Sequence[str] = (),
    fail_on: Level = Level.MUST,
) -> Report:
    rules = load_standards(standards, rules_dirs, disabled)
    logger.info("checking %s against %d rules from %s", target.name, len(rules), ", ".join(standards))
    findings = evaluate(target, rules)
    return build_report(
        findings,
        target=target.name,
        standards=standards,
        warnings=target.warnings,
        fail_on=fail_on,
    )


def write_output(report: Report, output_path: str | None, report_format: str, quiet: bool = False) -> None:
    payload = render_markdown(report) if report_format == "markdown" else render_json(report)
    if output_path:
        output_file = Path(output_path)
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"cannot write report to {output_path}: {exc.strerror or exc}") from exc

    if not quiet:
        print(format_summary_table(report))
    if output_path:
        if not quiet:
            print(f"\nReport written to {output_path}")
    else:
        if not quiet:
            print(f"\n{report_format.upper()} Report")
        print(payload)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        setup_logging("DEBUG", stream=sys.stderr)
    elif args.quiet:
        setup_logging("ERROR", stream=sys.stderr)
    else:
        setup_logging(stream=sys.stderr)

    try:
        config = load_config(args.config)
        rules_dirs = [*args.rules_dirs, *config.rules_dirs]
        if args.list_standards:
            for name in list_standards(rules_dirs):
                print(name)
            return 0
        report = _run(args, config, rules_dirs)
        write_output(report, args.output_path, args.format or config.format, quiet=args.quiet)
    except StdcheckError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    return report.exit_code()


def _run(args: argparse.Namespace, config: Config, rules_dirs: Sequence[str]) -> Report:
    standards = resolve_standards(args.standards or list(config.standards), rules_dirs)
    target = resolve_target(args.target, args.text)
    fail_on = Level(args.fail_on) if args.fail_on else config.fail_on
    return run_check(target, standards, rules_dirs, config.disabled_rules, fail_on)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
