"""CLI entrypoints for blueprint commands."""

from __future__ import annotations

import argparse
import dataclasses
import json
from pathlib import Path
from typing import Any, List

from .chain.client import NETWORK_URLS
from .config import BlueprintConfig, load_config
from .errors import BlueprintError, ChainClientError, ConfigError
from .logging import configure_logging
from .models import ModuleAbi
from .orchestrator import Orchestrator

FRAMEWORK_ADDRESSES = ("0x1", "0x3", "0x4")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help="Path to blueprint.yaml or a directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprint",
        description="Generate typed TypeScript payload builders from on-chain Move module ABIs.",
    )
    _add_verbose_option(parser)
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Fetch module ABIs for accounts and write generated code.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    generate_parser.add_argument(
        "addresses",
        nargs="*",
        metavar="ADDRESS",
        help="Account addresses whose modules should be generated.",
    )
    generate_parser.add_argument(
        "--framework",
        action="append",
        choices=FRAMEWORK_ADDRESSES,
        default=[],
        help="Include a framework account (0x1 framework, 0x3 legacy token, 0x4 token objects).",
    )
    generate_parser.add_argument(
        "--network",
        choices=sorted(NETWORK_URLS),
        default=None,
        help="Network to fetch ABIs from (overrides the config file).",
    )
    generate_parser.add_argument("--node-url", default=None, help="Explicit node REST API URL.")
    generate_parser.add_argument("--output", type=Path, default=None, help="Output directory.")

    render_parser = subparsers.add_parser(
        "render",
        help="Render code for a saved module ABI without touching the network.",
    )
    _add_verbose_option(render_parser, suppress_default=True)
    _add_config_option(render_parser)
    render_parser.add_argument("abi", type=Path, metavar="ABI_JSON", help="Module ABI JSON file.")
    render_parser.add_argument("--source", type=Path, default=None, help="Move source of the module.")
    render_parser.add_argument("--output", type=Path, default=None, help="Write to a file instead of stdout.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for blueprint commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"blueprint: {exc}\n")

    if args.command == "generate":
        _run_generate(parser, args, config)
    elif args.command == "render":
        _run_render(parser, args, config)
    elif args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace, config: BlueprintConfig) -> None:
    addresses: List[str] = [*args.framework, *args.addresses]
    if not addresses:
        parser.exit(1, "blueprint generate: provide at least one ADDRESS or --framework\n")

    overrides: dict[str, Any] = {}
    if args.network:
        overrides["network"] = args.network
    if args.node_url:
        overrides["node_url"] = args.node_url
    if args.output:
        overrides["output_path"] = args.output
    config = dataclasses.replace(config, **overrides)

    try:
        report = Orchestrator(config).run(addresses)
    except (BlueprintError, ChainClientError, ConfigError) as exc:
        parser.exit(1, f"blueprint generate failed: {exc}\nRun with --verbose for more details.\n")

    print(
        f"Generated {report.functions_emitted} functions in {report.modules_emitted} modules "
        f"at {_relativize(config.output_path)}"
    )
    if report.functions_failed or report.functions_skipped:
        print(f"{report.functions_failed} functions failed, {report.functions_skipped} skipped")
    if report.failed_addresses:
        parser.exit(1, f"Could not fetch modules for: {', '.join(report.failed_addresses)}\n")


def _run_render(parser: argparse.ArgumentParser, args: argparse.Namespace, config: BlueprintConfig) -> None:
    try:
        payload = json.loads(args.abi.read_text(encoding="utf-8"))
        source = args.source.read_text(encoding="utf-8") if args.source else None
    except (OSError, json.JSONDecodeError) as exc:
        parser.exit(1, f"blueprint render: {exc}\n")
    if isinstance(payload, dict) and isinstance(payload.get("abi"), dict):
        payload = payload["abi"]
    if not isinstance(payload, dict):
        parser.exit(1, "blueprint render: ABI_JSON must contain a module ABI object\n")

    try:
        module = ModuleAbi.from_dict(payload)
        orchestrator = Orchestrator(config)
        unit = orchestrator.generate_module(module, source)
    except BlueprintError as exc:
        parser.exit(1, f"blueprint render failed: {exc}\n")
    if unit is None:
        parser.exit(1, f"blueprint render: no functions could be generated for {module.name}\n")

    contents = orchestrator.renderer.render_module_file(unit.code)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(contents, encoding="utf-8")
        print(f"Module written to {_relativize(args.output)}")
    else:
        print(contents, end="")


def _relativize(path: Path) -> str:
    try:
        return str(Path(path).resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":  # pragma: no cover
    main()
