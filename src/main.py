# src/main.py — v3
"""CLI entry point — generate, list, plans, clear, set-key, check commands.

Usage:
    widgetsmith generate "<prompt>" [--symbol S --company C --industry I]
    widgetsmith generate "<prompt>" --plan-only
    widgetsmith list
    widgetsmith plans
    widgetsmith clear
    widgetsmith set-key <api-key>
    widgetsmith check
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from widgetsmith.version import __version__

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.core.models import AIAnalysis, ImplementationPlan, RunReport

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="widgetsmith",
        description=f"widgetsmith v{__version__} — AI dashboard widget generator",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- generate ---
    p_generate = subparsers.add_parser(
        "generate", help="Generate a widget from a natural-language request",
    )
    p_generate.add_argument("prompt", help="What the widget should do")
    p_generate.add_argument("--symbol", default=None, help="Company ticker symbol")
    p_generate.add_argument("--company", default=None, help="Company name")
    p_generate.add_argument("--industry", default=None, help="Company industry")
    p_generate.add_argument(
        "--plan-only", action="store_true",
        help="Analyze and plan, but do not generate files",
    )
    p_generate.add_argument(
        "--calls-log", type=Path, default=None,
        help="Write completion call records to this JSONL file",
    )
    p_generate.set_defaults(func=_cmd_generate)

    # --- list ---
    p_list = subparsers.add_parser("list", help="List stored generated files")
    p_list.set_defaults(func=_cmd_list)

    # --- plans ---
    p_plans = subparsers.add_parser("plans", help="Show pending registry update plans")
    p_plans.set_defaults(func=_cmd_plans)

    # --- clear ---
    p_clear = subparsers.add_parser("clear", help="Remove stored files and plans")
    p_clear.set_defaults(func=_cmd_clear)

    # --- set-key ---
    p_key = subparsers.add_parser("set-key", help="Persist the completion API key")
    p_key.add_argument("key", help="API key")
    p_key.set_defaults(func=_cmd_set_key)

    # --- check ---
    p_check = subparsers.add_parser("check", help="Test the completion service connection")
    p_check.set_defaults(func=_cmd_check)

    return parser


async def _cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Run the pipeline (or only its planning half) for one prompt."""
    from widgetsmith.api.facade import build_pipeline
    from widgetsmith.core.models import CompanyContext, GenerationRequest

    company = None
    if args.symbol or args.company or args.industry:
        if not (args.symbol and args.company and args.industry):
            logger.error("--symbol, --company and --industry must be given together")
            return 1
        company = CompanyContext(symbol=args.symbol, name=args.company, industry=args.industry)

    request = GenerationRequest(user_prompt=args.prompt, company_context=company)
    handle = await build_pipeline(settings=settings)

    if args.plan_only:
        analysis, plan = await handle.pipeline.prepare(request)
        _print_plan(analysis, plan)
        exit_code = 0
    else:
        report = await handle.pipeline.run(request)
        _print_report(report)
        exit_code = 0 if report.status == "succeeded" else 1

    if args.calls_log:
        handle.call_logger.save(args.calls_log)
    return exit_code


async def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """Print every stored artifact from the manifest."""
    from widgetsmith.api.facade import build_pipeline

    handle = await build_pipeline(settings=settings)
    artifacts = await handle.store.list_all()
    if not artifacts:
        print("No generated files stored.")
        return 0
    for artifact in artifacts:
        print(f"{artifact.timestamp.isoformat()}  {len(artifact.content):>7}  {artifact.path}")
    return 0


async def _cmd_plans(args: argparse.Namespace, settings: Settings) -> int:
    """Print pending registry update plans."""
    from widgetsmith.api.facade import build_pipeline

    handle = await build_pipeline(settings=settings)
    plans = await handle.store.list_update_plans()
    if not plans:
        print("No registry update plans stored.")
        return 0
    for plan in plans:
        print(f"\n{plan.widget_type}:")
        for record in (plan.container, plan.types, plan.library):
            print(f"  {record.file}")
            for change in record.changes:
                detail = change.line if change.line is not None else change.data
                print(f"    [{change.type}] {detail}")
    return 0


async def _cmd_clear(args: argparse.Namespace, settings: Settings) -> int:
    """Remove stored artifacts, the manifest and update plans."""
    from widgetsmith.api.facade import build_pipeline

    handle = await build_pipeline(settings=settings)
    removed = await handle.store.clear_all()
    print(f"Removed {removed} stored entries.")
    return 0


async def _cmd_set_key(args: argparse.Namespace, settings: Settings) -> int:
    """Persist the API key for later runs."""
    from widgetsmith.config.credentials import Credentials, save_api_key
    from widgetsmith.kv.kv_factory import create_kv_store

    kv = create_kv_store(settings)
    await save_api_key(Credentials(), kv, args.key)
    print("API key saved.")
    return 0


async def _cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    """Verify that the configured key can reach the completion service."""
    from widgetsmith.api.facade import build_pipeline

    handle = await build_pipeline(settings=settings)
    if not handle.credentials.is_configured:
        print("No API key configured. Use 'widgetsmith set-key <key>'.")
        return 1
    ok = await handle.completion.test_connection()
    print("AI connection successful" if ok else "AI connection failed")
    return 0 if ok else 1


def _print_plan(analysis: AIAnalysis, plan: ImplementationPlan) -> None:
    """Print analysis and plan without generating files."""
    print(f"\nWidget: {analysis.widget_title} ({analysis.widget_type})")
    print(f"  Complexity:  {analysis.complexity}, ~{analysis.estimated_time}")
    print(f"  APIs:        {', '.join(analysis.required_apis) or 'none'}")
    if analysis.risks:
        print(f"  Risks:       {'; '.join(analysis.risks)}")
    print(f"\nPlan ({plan.total_steps} steps):")
    for step in plan.steps:
        print(f"  {step.step}. {step.description} [{step.estimated_duration}]")
        for path in step.files:
            print(f"       {path}")


def _print_report(report: RunReport) -> None:
    """Print a human-readable summary of a RunReport."""
    print(f"\nRun {report.run_id}: {report.status}")
    if report.failure is not None:
        print(f"  Failed while {report.failure.stage}: {report.failure.reason}")
        return
    if report.write_result is not None:
        print(f"  {report.write_result.message}")
    for path in report.written_files:
        print(f"  + {path}")
    for error in report.errors:
        print(f"  ! {error.path} ({error.stage}): {error.reason}")
    print(f"  Completion calls: {report.llm_calls}, tokens: {report.total_tokens}")


def _load_settings(verbose: bool) -> Settings:
    """Load settings and configure logging for CLI usage."""
    from widgetsmith.config.settings import Settings
    from widgetsmith.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    return settings


if __name__ == "__main__":
    sys.exit(main())
