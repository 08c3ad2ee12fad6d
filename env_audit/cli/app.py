"""
CLI 入口模块 - 使用 Typer 构建命令行界面

检查流程：
1. 加载配置
2. 发现文件并解析 .env 定义
3. 扫描代码中的环境变量使用
4. 分析并生成报告
"""

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from env_audit.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEMPLATE,
    AuditConfig,
    load_config,
)
from env_audit.core.engine import make_walker, resolve_root, run_scan
from env_audit.core.rules import compile_ignore_patterns
from env_audit.core.scanner.core import load_definitions, scan_code_files
from env_audit.core.scanner.dotenv import parse_dotenv_file
from env_audit.core.scanner.models import IssueKind, ScanReport, Severity
from env_audit.errors import EnvAuditError
from env_audit.reporters import JsonReporter, MarkdownReporter, Reporter, RichReporter

logger = logging.getLogger("env_audit.cli")

# Exit status for fatal errors (bad root, bad config); 1 is reserved for failed checks
EXIT_FATAL = 2

# 创建 Typer 应用实例
app = typer.Typer(
    name="env-audit",
    help=(
        "Scan projects for environment variable issues: variables used but never "
        "defined, defined but never used, and inconsistent names (DB_URL vs DATABASE_URL)."
    ),
    add_completion=False,
)

# Rich Console 用于输出
console = Console()
err_console = Console(stderr=True)


PATH_ARG = typer.Argument(".", help="Project path to scan")
CONFIG_OPT = typer.Option(
    None, "--config", "-c", help=f"Path to config file (default: <path>/{CONFIG_FILE_NAME})"
)
FORMAT_OPT = typer.Option(
    None, "--format", "-f", help="Output format: terminal, json or markdown"
)
OUTPUT_OPT = typer.Option(None, "--output", "-o", help="Write the report to this file")
SEVERITY_OPT = typer.Option(
    None, "--severity", help="Minimum severity to report: error, warning or info"
)
MISSING_OPT = typer.Option(False, "--missing", help="Only check for missing env vars")
UNUSED_OPT = typer.Option(False, "--unused", help="Only check for unused env vars")
NAMING_OPT = typer.Option(False, "--naming", help="Only check naming conventions")
ENV_FILE_OPT = typer.Option(
    None, "--env-file", help="Additional env file to parse (repeatable)"
)
IGNORE_OPT = typer.Option(
    None, "--ignore", help="Additional variable name regex to ignore (repeatable)"
)
LANGUAGE_OPT = typer.Option(
    None, "--language", help="Only scan this language (repeatable)"
)
JOBS_OPT = typer.Option(None, "--jobs", "-j", help="Worker threads for scanning")
NO_COLOR_OPT = typer.Option(False, "--no-color", help="Disable colored output")
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Show detailed output")
QUIET_OPT = typer.Option(False, "--quiet", "-q", help="Only log errors")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route library logging through rich on stderr."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


def fail(message: str, code: int = EXIT_FATAL) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code)


def selected_checks(missing: bool, unused: bool, naming: bool) -> set[IssueKind]:
    """No flag means every check."""
    chosen = {
        kind
        for kind, flag in (
            (IssueKind.MISSING, missing),
            (IssueKind.UNUSED, unused),
            (IssueKind.NAMING, naming),
        )
        if flag
    }
    return chosen or set(IssueKind)


def resolve_config(
    root: Path,
    config_path: Optional[Path],
    **overrides,
) -> AuditConfig:
    path = config_path if config_path is not None else root / CONFIG_FILE_NAME
    if config_path is not None and not config_path.exists():
        raise EnvAuditError(f"Config file not found: {config_path}")
    config = load_config(path)
    if path.exists():
        logger.debug(f"Loaded configuration from {path}")
    return config.with_overrides(**overrides)


def execute_scan(
    target: str,
    config_path: Optional[Path] = None,
    output_format: Optional[str] = None,
    output: Optional[Path] = None,
    severity: Optional[str] = None,
    checks: Optional[set[IssueKind]] = None,
    env_files: Optional[List[str]] = None,
    ignore: Optional[List[str]] = None,
    languages: Optional[List[str]] = None,
    jobs: Optional[int] = None,
) -> tuple[ScanReport, AuditConfig]:
    root = resolve_root(Path(target))
    config = resolve_config(
        root,
        config_path,
        env_files=env_files,
        ignore_patterns=ignore,
        languages=languages,
        min_severity=severity,
        jobs=jobs,
        output_format=output_format,
        output_file=str(output) if output is not None else None,
    )

    def on_file_scanned(file_path: str, language: str) -> None:
        logger.debug(f"({language}) {file_path}")

    report = run_scan(root, config, checks or set(IssueKind), on_file=on_file_scanned)
    logger.debug(
        f"Scanned {report.summary.files_scanned} files in {report.summary.duration_ms}ms"
    )
    return report, config


def emit_report(
    report: ScanReport,
    config: AuditConfig,
    target: str,
    no_color: bool,
    quiet: bool,
) -> None:
    """Print or write the report in the configured format."""
    fmt = config.output.format
    show = config.output.show_suggestions
    reporter: Reporter
    if fmt == "json":
        reporter = JsonReporter()
    elif fmt == "markdown":
        reporter = MarkdownReporter(show_suggestions=show)
    else:
        reporter = RichReporter(Console(no_color=no_color), show_suggestions=show)

    if config.output.output_file:
        out_path = Path(config.output.output_file)
        try:
            out_path.write_text(reporter.render(report, target), encoding="utf-8")
        except OSError as e:
            fail(f"Failed to write report to {out_path}: {e}")
        if not quiet:
            err_console.print(f"Report written to: {out_path}")
    else:
        reporter.report(report, target)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    env-audit scans your project for environment variable drift.

    Running it without a command scans the current directory.
    """
    if ctx.invoked_subcommand is None:
        setup_logging()
        try:
            report, config = execute_scan(".")
        except EnvAuditError as e:
            fail(str(e))
        emit_report(report, config, ".", no_color=False, quiet=False)


@app.command()
def scan(
    target: str = PATH_ARG,
    config: Optional[Path] = CONFIG_OPT,
    format: Optional[str] = FORMAT_OPT,
    output: Optional[Path] = OUTPUT_OPT,
    severity: Optional[str] = SEVERITY_OPT,
    missing: bool = MISSING_OPT,
    unused: bool = UNUSED_OPT,
    naming: bool = NAMING_OPT,
    env_file: Optional[List[str]] = ENV_FILE_OPT,
    ignore: Optional[List[str]] = IGNORE_OPT,
    language: Optional[List[str]] = LANGUAGE_OPT,
    jobs: Optional[int] = JOBS_OPT,
    no_color: bool = NO_COLOR_OPT,
    verbose: bool = VERBOSE_OPT,
    quiet: bool = QUIET_OPT,
) -> None:
    """
    Scan a project for environment variable issues.

    Examples:
        env-audit scan
        env-audit scan ./my-project --format json
        env-audit scan --missing --severity warning
    """
    setup_logging(verbose, quiet)
    try:
        report, resolved = execute_scan(
            target, config, format, output, severity,
            selected_checks(missing, unused, naming),
            env_file, ignore, language, jobs,
        )
    except EnvAuditError as e:
        fail(str(e))
    emit_report(report, resolved, target, no_color, quiet)


@app.command()
def check(
    target: str = PATH_ARG,
    config: Optional[Path] = CONFIG_OPT,
    format: Optional[str] = FORMAT_OPT,
    output: Optional[Path] = OUTPUT_OPT,
    severity: Optional[str] = SEVERITY_OPT,
    missing: bool = MISSING_OPT,
    unused: bool = UNUSED_OPT,
    naming: bool = NAMING_OPT,
    env_file: Optional[List[str]] = ENV_FILE_OPT,
    ignore: Optional[List[str]] = IGNORE_OPT,
    language: Optional[List[str]] = LANGUAGE_OPT,
    jobs: Optional[int] = JOBS_OPT,
    fail_on: str = typer.Option(
        "error", "--fail-on", help="Fail if issues of this severity or higher are found"
    ),
    summary: bool = typer.Option(
        False, "--summary", help="Print summary only, not individual issues"
    ),
    no_color: bool = NO_COLOR_OPT,
    verbose: bool = VERBOSE_OPT,
    quiet: bool = QUIET_OPT,
) -> None:
    """
    Run as a CI check: exit with status 1 when issues at or above --fail-on remain.
    """
    setup_logging(verbose, quiet)
    try:
        threshold = Severity.parse(fail_on)
    except ValueError as e:
        fail(str(e))
    try:
        report, resolved = execute_scan(
            target, config, format, output, severity,
            selected_checks(missing, unused, naming),
            env_file, ignore, language, jobs,
        )
    except EnvAuditError as e:
        fail(str(e))

    if summary:
        s = report.summary
        console.print(
            f"Errors: {s.errors}  Warnings: {s.warnings}  Info: {s.infos}",
            highlight=False,
        )
    else:
        emit_report(report, resolved, target, no_color, quiet)

    failing = [i for i in report.issues if i.severity >= threshold]
    raise typer.Exit(1 if failing else 0)


@app.command()
def init(
    target: str = typer.Argument(".", help="Directory to create the config file in"),
) -> None:
    """Generate a default .env-audit.toml config file."""
    config_path = Path(target) / CONFIG_FILE_NAME
    if config_path.exists():
        fail(f"Config file already exists: {config_path}", code=1)
    try:
        config_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        fail(f"Failed to write config file {config_path}: {e}")
    console.print(f"Created config file: {config_path}", highlight=False)


@app.command(name="list")
def list_vars(
    target: str = PATH_ARG,
    config: Optional[Path] = CONFIG_OPT,
    defined: bool = typer.Option(False, "--defined", help="Show only defined vars"),
    used: bool = typer.Option(False, "--used", help="Show only used vars"),
    locations: bool = typer.Option(False, "--locations", help="Include file locations"),
    verbose: bool = VERBOSE_OPT,
) -> None:
    """List all detected environment variables."""
    setup_logging(verbose)
    try:
        root = resolve_root(Path(target))
        resolved = resolve_config(root, config)
    except EnvAuditError as e:
        fail(str(e))

    source_files, env_files = make_walker(root, resolved).discover()

    if not used:
        console.print("[bold]Defined environment variables:[/bold]")
        definitions, _ = load_definitions(env_files)
        seen: set[str] = set()
        for site in definitions:
            if locations:
                console.print(f"  {site.name} ({escape(str(site.location))})", highlight=False)
            elif site.name not in seen:
                console.print(f"  {site.name}", highlight=False)
            seen.add(site.name)
        console.print()

    if not defined:
        console.print("[bold]Used environment variables:[/bold]")
        ignore = compile_ignore_patterns(resolved.naming.ignore_patterns)
        code = scan_code_files(source_files, ignore, jobs=resolved.scan.jobs)
        seen = set()
        for usage in code.usages:
            if locations:
                console.print(f"  {usage.name} ({escape(str(usage.location))})", highlight=False)
            elif usage.name not in seen:
                console.print(f"  {usage.name}", highlight=False)
            seen.add(usage.name)


@app.command()
def compare(
    file1: Path = typer.Argument(..., help="First env file"),
    file2: Path = typer.Argument(..., help="Second env file"),
    show_values: bool = typer.Option(
        False, "--show-values", help="Show differing values (may expose secrets)"
    ),
) -> None:
    """Compare the variables defined in two env files."""
    try:
        defs1 = parse_dotenv_file(file1)
        defs2 = parse_dotenv_file(file2)
    except (OSError, UnicodeDecodeError) as e:
        fail(f"Failed to read env file: {e}")

    names1 = {d.name for d in defs1}
    names2 = {d.name for d in defs2}

    console.print(escape(f"Comparing {file1} and {file2}\n"), highlight=False)
    for left, left_names, right_names in ((file1, names1, names2), (file2, names2, names1)):
        only = sorted(left_names - right_names)
        if only:
            console.print(f"[bold]Only in {escape(str(left))}:[/bold]")
            for name in only:
                console.print(f"  {name}", highlight=False)
            console.print()

    in_both = sorted(names1 & names2)
    console.print(f"In both files: {len(in_both)} variables", highlight=False)

    if show_values:
        # Last assignment wins, as when the file is sourced
        values1 = {d.name: d.value for d in defs1}
        values2 = {d.name: d.value for d in defs2}
        differing = [n for n in in_both if values1[n] != values2[n]]
        if differing:
            console.print("\n[bold]Values comparison:[/bold]")
            for name in differing:
                console.print(f"  {name} differs:", highlight=False)
                console.print(escape(f"    {file1}: {values1[name]!r}"), highlight=False)
                console.print(escape(f"    {file2}: {values2[name]!r}"), highlight=False)


@app.command()
def version() -> None:
    """Show the version of env-audit."""
    from env_audit import __version__
    console.print(f"[bold]env-audit[/bold] v{__version__}")


if __name__ == "__main__":
    app()
