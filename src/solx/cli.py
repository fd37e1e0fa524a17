"""
CLI entry point for SOL-X.

Usage:
    solx new my_counter
    solx build --path my_counter
    solx compile program.solx -o lib.rs
    solx parse program.solx --canonical
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import SolxConfig
from .errors import ParseError, ProjectError, SolxError

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Send ``solx.*`` log records to stderr through rich."""
    logger = logging.getLogger("solx")
    logger.handlers.clear()
    handler = RichHandler(console=err_console, show_time=False, show_path=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def load_config(args: argparse.Namespace) -> SolxConfig:
    config = SolxConfig.from_env()
    if getattr(args, "strict", False):
        config.strict = True
    return config


def print_error(e: Exception) -> None:
    if isinstance(e, ParseError):
        console.print("[red]✗ Parse failed[/red]")
        for issue in e.issues:
            console.print(f"  [red]• {escape(str(issue))}[/red]")
        return
    console.print(f"[red]Error: {escape(str(e))}[/red]")


def cmd_new(args: argparse.Namespace) -> int:
    """Create a new SOL-X project."""
    from solx.project import create_project

    try:
        config = load_config(args)
        create_project(args.name, config=config)
    except SolxError as e:
        print_error(e)
        return 1
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    console.print(f"[green]✓ Created new SOL-X project: {args.name}[/green]")
    console.print(f"  cd {args.name}")
    console.print("  solx build")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Compile program.solx and run anchor build."""
    from solx.project import build_project

    project = Path(args.path)

    console.print()
    console.print(Panel(
        f"[bold cyan]{escape(str(project.resolve()))}[/bold cyan]",
        title="[bold]SOL-X Build[/bold]",
    ))
    console.print()

    try:
        config = load_config(args)
        result = build_project(project, config)
    except SolxError as e:
        print_error(e)
        return 1

    console.print(f"[green]✓ Compiled {escape(str(result.source_path))}[/green]")
    for warning in result.warnings:
        console.print(f"  [yellow]⚠ {escape(warning)}[/yellow]")
    console.print(f"[green]✓ Generated Anchor code: {escape(str(result.output_path))}[/green]")

    if not result.anchor_ran:
        console.print(f"[dim]Skipping anchor build (no Anchor.toml in {escape(str(project))}).[/dim]")
        return 0

    if result.anchor_status == 0:
        console.print("[green]✓ Build successful![/green]")
    else:
        console.print(f"[red]✗ Anchor build failed with exit code: {result.anchor_status}[/red]")
    return result.exit_code


def cmd_test(args: argparse.Namespace) -> int:
    """Run anchor test."""
    from solx.project import run_tests

    console.print("[bold]Running tests...[/bold]")
    try:
        status = run_tests(Path(args.path), load_config(args))
    except SolxError as e:
        print_error(e)
        return 1

    if status == 0:
        console.print("[green]✓ Tests passed![/green]")
    else:
        console.print(f"[red]✗ Tests failed with exit code: {status}[/red]")
    return status


def cmd_fmt(args: argparse.Namespace) -> int:
    """Format SOL-X sources (not implemented yet)."""
    from solx.project import format_project

    format_project(Path(args.path))
    console.print("[yellow]Formatting not yet implemented. Coming soon![/yellow]")
    return 0


def _read_source(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as e:
        raise ProjectError(f"file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectError(f"Failed to read {path}: {e}") from e


def _write_output(path: str, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ProjectError(f"Failed to write {path}: {e}") from e


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile a single file to Anchor source."""
    from solx.core import compile_program

    try:
        source = _read_source(args.file)
        result = compile_program(source, load_config(args))
    except SolxError as e:
        print_error(e)
        return 1

    for warning in result.warnings:
        err_console.print(f"[yellow]⚠ {escape(warning)}[/yellow]")

    if args.output:
        try:
            _write_output(args.output, result.code)
        except SolxError as e:
            print_error(e)
            return 1
        console.print(f"[green]✓ Wrote {escape(args.output)}[/green]")
    else:
        console.out(result.code, highlight=False)
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a file and show its structure (no code generation)."""
    from solx.analysis import validate
    from solx.lang import format_program, parse

    try:
        source = _read_source(args.file)
        program = parse(source)
    except SolxError as e:
        print_error(e)
        return 1

    console.print()
    console.print(Panel(f"[bold]{escape(program.name)}[/bold]", title="Parsed Program"))
    console.print()

    accounts = Table(title="Accounts")
    accounts.add_column("Name", style="cyan")
    accounts.add_column("Fields")
    for acc in program.accounts:
        accounts.add_row(acc.name, ", ".join(f"{f.name}: {f.ty}" for f in acc.fields) or "-")
    console.print(accounts)

    instructions = Table(title="Instructions")
    instructions.add_column("Name", style="cyan")
    instructions.add_column("Context", style="dim")
    instructions.add_column("Args", style="dim")
    instructions.add_column("Statements", justify="right")
    for ix in program.instructions:
        instructions.add_row(
            ix.name,
            ", ".join(p.name for p in ix.context_params()) or "-",
            ", ".join(f"{p.name}: {p.ty.to_source()}" for p in ix.argument_params()) or "-",
            str(len(ix.body)),
        )
    console.print(instructions)

    status = 0
    try:
        validate(program, strict=load_config(args).strict)
        console.print("[green]✓ All account references resolve[/green]")
    except SolxError as e:
        print_error(e)
        status = 1

    if args.canonical:
        console.print("\n[bold]Canonical source:[/bold]")
        console.out(format_program(program), highlight=False)

    if args.output:
        output_data = {
            "program": program.name,
            "accounts": [
                {"name": acc.name, "fields": {f.name: str(f.ty) for f in acc.fields}}
                for acc in program.accounts
            ],
            "instructions": [
                {
                    "name": ix.name,
                    "params": {p.name: p.ty.to_source() for p in ix.params},
                    "statements": len(ix.body),
                }
                for ix in program.instructions
            ],
        }
        try:
            _write_output(args.output, json.dumps(output_data, indent=2))
        except SolxError as e:
            print_error(e)
            return 1
        console.print(f"\n[dim]Structure exported to: {escape(args.output)}[/dim]")

    return status


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="solx",
        description="SOL-X: A contract DSL that compiles to Anchor",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject duplicate names and unmatched init accounts"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # new command
    new_parser = subparsers.add_parser("new", help="Create a new SOL-X project")
    new_parser.add_argument("name", type=str, help="Project name")

    # build, test and fmt work on a project directory
    for name, help_text in (
        ("build", "Build the SOL-X project (generates Anchor code)"),
        ("test", "Run tests"),
        ("fmt", "Format SOL-X source files"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--path", "-p",
            type=str,
            default=".",
            help="Project directory (default: current directory)"
        )

    # compile command
    compile_parser = subparsers.add_parser("compile", help="Compile one file to Anchor source")
    compile_parser.add_argument("file", type=str, help="Path to a .solx file")
    compile_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write generated code here instead of stdout"
    )

    # parse command (preview only, no code generation)
    parse_parser = subparsers.add_parser("parse", help="Parse a file and show its structure")
    parse_parser.add_argument("file", type=str, help="Path to a .solx file")
    parse_parser.add_argument(
        "--canonical",
        action="store_true",
        help="Print the canonical form of the source"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output file for JSON structure"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "new":
        return cmd_new(args)
    elif args.command == "build":
        return cmd_build(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "fmt":
        return cmd_fmt(args)
    elif args.command == "compile":
        return cmd_compile(args)
    elif args.command == "parse":
        return cmd_parse(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
