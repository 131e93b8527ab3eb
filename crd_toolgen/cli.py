"""
Command-line interface for crd-toolgen.

Renders generated Go toolset code for CustomResourceDefinitions to the
terminal. Writing files is left to the caller.
"""

import argparse
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .codegen.core.config import GenerationRequest, GeneratorConfig, load_config
from .codegen.core.crd import CRDMetadata, parse_crd
from .codegen.core.errors import ToolgenError
from .codegen.core.generator import (
    CodeGenerator,
    GenerationResult,
    generate_batch,
    generate_code,
)
from .codegen.registry import get_generator, list_all_language_info
from .logging_config import configure_logging, get_logger
from .utils import load_crd_documents, load_documentation

logger = get_logger(__name__)

# Initialize rich console
console = Console()


class CLIError(ToolgenError):
    """Exception raised for CLI-related errors."""

    pass


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="crd-toolgen",
        description="Generate MCP toolset code from Kubernetes CustomResourceDefinitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  crd-toolgen --crd widget-crd.yaml
  crd-toolgen --crd widget-crd.yaml --crud cr --show client-wrapper
  crd-toolgen --crd-dir config/crd --dry-run
  crd-toolgen --list-languages
        """.strip(),
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group()
    input_group.add_argument("--crd", metavar="FILE", help="CRD file (YAML or JSON)")
    input_group.add_argument(
        "--crd-dir", metavar="DIR", help="Directory of CRD files (batch mode)"
    )

    # Core generation options
    gen_group = parser.add_argument_group("generation")
    gen_group.add_argument(
        "--language", "-l", default="go", help="Target language (default: go)"
    )
    gen_group.add_argument(
        "--crud",
        metavar="TOKENS",
        help="Operations to generate: c=create, r=get+list, u=update, d=delete "
        "(default: all)",
    )
    gen_group.add_argument(
        "--package", dest="package_name", metavar="NAME", help="Go package name"
    )
    gen_group.add_argument("--module-path", metavar="PATH", help="Go module path")
    gen_group.add_argument(
        "--config", metavar="FILE", help="Configuration file (JSON or YAML)"
    )
    gen_group.add_argument(
        "--templates", metavar="DIR", help="Directory with template overrides"
    )
    gen_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't generate comments in output code",
    )
    gen_group.add_argument(
        "--generate-crd-resource",
        action="store_true",
        help="Embed the CRD as an MCP resource",
    )
    gen_group.add_argument(
        "--generate-doc-resource",
        metavar="PATH_OR_URL",
        help="Embed documentation from a file or URL as an MCP resource",
    )

    # Output options
    out_group = parser.add_argument_group("output")
    out_group.add_argument(
        "--show",
        metavar="ARTIFACT",
        help="Print an artifact's code, or 'all' for every artifact",
    )
    out_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list the artifacts that would be generated",
    )
    out_group.add_argument(
        "--verbose", "-v", action="store_true", help="Debug logging and metadata"
    )

    # Informational commands
    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the crd-toolgen command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        if args.list_languages:
            return _list_languages()

        if not (args.crd or args.crd_dir):
            console.print("[red]✗[/red] An input is required: --crd FILE or --crd-dir DIR")
            return 1

        config = _build_config(args)
        # Operation tokens are checked before any CRD is read
        request = GenerationRequest.from_config(config)
        generator = get_generator(args.language, config)

        for warning in generator.config_warnings():
            console.print(f"[yellow]⚠️  {warning}[/yellow]")

        documents = load_crd_documents(args.crd or args.crd_dir)
        if not documents:
            source = args.crd or args.crd_dir
            console.print(f"[yellow]⚠️  No CustomResourceDefinitions found in {source}[/yellow]")
            return 1

        if args.crd and len(documents) == 1:
            return _run_single(generator, documents[0], request, args)
        return _run_batch(generator, documents, request, args)

    except ToolgenError as e:
        logger.debug("Aborted: %s", e, exc_info=True)
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from CLI arguments."""
    overrides: Dict[str, Any] = {
        "package_name": args.package_name,
        "module_path": args.module_path,
        "crud": args.crud,
        "template_dir": args.templates,
    }

    if args.no_comments:
        overrides["include_comments"] = False

    if args.generate_crd_resource:
        overrides["generate_crd_resource"] = True

    if args.generate_doc_resource:
        overrides["generate_doc_resource"] = True
        overrides["doc_source"] = args.generate_doc_resource

    config = load_config(args.language.lower(), overrides, args.config)

    if config.generate_doc_resource and config.doc_source and not config.doc_content:
        config.doc_content = load_documentation(config.doc_source)

    return config


def _run_single(
    generator: CodeGenerator,
    document: Tuple[str, Dict[str, Any]],
    request: GenerationRequest,
    args: argparse.Namespace,
) -> int:
    """Generate one resource; any failure ends the run."""
    source, crd = document
    metadata = parse_crd(crd)
    result = generate_code(generator, metadata, request)

    if not result.success:
        console.print(
            f"[red]✗ Code generation failed for {source}:[/red] {result.error_message}"
        )
        return 1

    _print_result(metadata, result, args)
    return 0


def _run_batch(
    generator: CodeGenerator,
    documents: List[Tuple[str, Dict[str, Any]]],
    request: GenerationRequest,
    args: argparse.Namespace,
) -> int:
    """Generate every resource, reporting failures and carrying on."""
    parsed: List[Tuple[str, CRDMetadata]] = []
    rejected: List[Tuple[str, str]] = []

    for source, crd in documents:
        try:
            parsed.append((source, parse_crd(crd)))
        except ToolgenError as e:
            logger.warning("Skipping CRD in %s: %s", source, e)
            rejected.append((source, str(e)))

    results = generate_batch(generator, [metadata for _, metadata in parsed], request)

    table = Table(title="📦 Batch Generation", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Source", style="dim")
    table.add_column("Kind", style="bold", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Details")

    for source, message in rejected:
        table.add_row(source, "-", "[red]✗ invalid[/red]", message)

    for (source, metadata), result in zip(parsed, results):
        if result.success:
            table.add_row(
                source,
                metadata.kind,
                "[green]✓[/green]",
                ", ".join(result.files),
            )
        else:
            table.add_row(source, metadata.kind, "[red]✗ failed[/red]", result.error_message)

    console.print()
    console.print(table)

    for (source, metadata), result in zip(parsed, results):
        if result.success and (args.show or args.verbose):
            _print_result(metadata, result, args, summary=False)

    failures = len(rejected) + sum(1 for result in results if not result.success)
    if failures:
        console.print(f"[red]✗ {failures} of {len(documents)} resources failed[/red]")
        return 1

    console.print(f"[green]✓[/green] Generated {len(results)} resources")
    return 0


def _print_result(
    metadata: CRDMetadata,
    result: GenerationResult,
    args: argparse.Namespace,
    summary: bool = True,
) -> None:
    """Show the artifacts of one generation result."""
    if summary or args.dry_run:
        table = Table(
            title=f"📄 {metadata.kind} ({metadata.api_version}, {metadata.scope.value})",
            box=box.SIMPLE,
            header_style="bold cyan",
        )
        table.add_column("Artifact", style="bold green")
        table.add_column("Lines", justify="right")
        table.add_column("Bytes", justify="right")
        for artifact, code in result.files.items():
            table.add_row(artifact, str(code.count("\n")), str(len(code.encode("utf-8"))))
        console.print(table)

    if args.show and not args.dry_run:
        selected = list(result.files) if args.show == "all" else [args.show]
        for artifact in selected:
            if artifact not in result.files:
                raise CLIError(
                    f"Unknown artifact '{artifact}'. Available: {', '.join(result.files)}"
                )
            console.print(
                Panel(
                    Syntax(result.files[artifact], "go", theme="monokai"),
                    title=f"{metadata.kind}: {artifact}",
                    border_style="green",
                )
            )

    # Show metadata if verbose
    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")
        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))
        console.print(metadata_table)

    # Show warnings with rich formatting
    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")
    table.add_column("Artifacts")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "none"
        table.add_row(
            lang_name,
            info["file_extension"],
            info["class"],
            aliases,
            ", ".join(info["artifacts"]),
        )

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
