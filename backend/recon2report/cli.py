"""
Command-line interface for Recon2Report.

Subcommands::

    recon2report parse scan.xml
    recon2report suggest scan.xml --phase no_creds --os Windows
    recon2report reference --phase credential_access
    recon2report serve --port 8000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from recon2report.api.schemas.attack_path import VectorResponse
from recon2report.core.logging import configure_logging
from recon2report.engine.evaluation import ApplicableVector, RuleEngine
from recon2report.engine.phases import normalize_phase
from recon2report.engine.templating import RenderContext
from recon2report.models.scan import HostScanRecord
from recon2report.models.state import AssessmentState
from recon2report.parsing import parse_hosts, parse_open_ports
from recon2report.rules.loader import default_rules_dir, load_corpus

logger = logging.getLogger("recon2report.cli")

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recon2report",
        description="Suggest attack vectors and commands from nmap results.",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="Log level.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser(
        "parse",
        help="Print the hosts and open ports found in nmap output.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_scan_arguments(parse_parser)
    parse_parser.add_argument("--json", action="store_true", help="Print JSON.")

    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Evaluate every scanned host and print applicable commands.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_scan_arguments(suggest_parser)
    suggest_parser.add_argument(
        "--phase",
        default="reconnaissance",
        help="Current phase, e.g. no_creds, credential_access.",
    )
    suggest_parser.add_argument(
        "--item",
        dest="items",
        action="append",
        default=[],
        help="Acquired item (repeatable), e.g. username, hash.",
    )
    suggest_parser.add_argument("--os", dest="target_os", help="Target OS; defaults to the scan's guess.")
    suggest_parser.add_argument("--domain", help="Domain; defaults to the one found by scan scripts.")
    suggest_parser.add_argument("--ip-range", dest="ip_range", help="In-scope range for <ip_range>.")
    _add_rules_argument(suggest_parser)
    suggest_parser.add_argument("--json", action="store_true", help="Print JSON.")

    reference_parser = subparsers.add_parser(
        "reference",
        help="Print every vector of a phase with raw syntax.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    reference_parser.add_argument("--phase", default="reconnaissance", help="Phase name or alias.")
    _add_rules_argument(reference_parser)
    reference_parser.add_argument("--json", action="store_true", help="Print JSON.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port.")

    return parser


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="nmap output file (-oX, or -oN with --text).")
    parser.add_argument(
        "--text",
        action="store_true",
        help="Read normal nmap output instead of XML.",
    )
    parser.add_argument("--ip", help="Host address; required with --text.")


def _add_rules_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rules",
        default=None,
        help="Rule corpus directory (defaults to the bundled corpus).",
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_hosts(args: argparse.Namespace) -> Optional[list[HostScanRecord]]:
    """Read and parse the scan file, or return ``None`` if it is unreadable."""
    try:
        raw = Path(args.file).expanduser().read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        print(f"[!] Cannot read {args.file}: {exc}", file=sys.stderr)
        return None

    if args.text:
        ports = parse_open_ports(raw)
        return [HostScanRecord(ip_address=args.ip, ports=tuple(ports))]
    return parse_hosts(raw)


def _load_engine(rules: Optional[str]) -> RuleEngine:
    directory = Path(rules).expanduser() if rules else default_rules_dir()
    return RuleEngine(load_corpus(directory))


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


def _print_vectors(vectors: Sequence[VectorResponse], ready: bool) -> None:
    current_service: Optional[str] = None
    for vector in vectors:
        if vector.service != current_service:
            current_service = vector.service
            print(f"  [{current_service}]")
        print(f"    - {vector.name} ({vector.id})")
        for command in vector.commands:
            line = command.ready_command if ready and command.ready_command else command.syntax
            print(f"        $ {line}")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def run_parse(args: argparse.Namespace) -> int:
    hosts = _load_hosts(args)
    if hosts is None:
        return EXIT_INPUT_ERROR

    if args.json:
        _print_json(
            [
                {
                    "ipAddress": host.ip_address,
                    "hostname": host.hostname,
                    "domainName": host.domain_name,
                    "computerName": host.computer_name,
                    "fqdn": host.fqdn,
                    "osGuess": host.os_guess,
                    "ports": [
                        {
                            "number": port.number,
                            "protocol": port.protocol,
                            "service": port.service,
                            "version": port.version,
                        }
                        for port in host.ports
                    ],
                }
                for host in hosts
            ]
        )
        return EXIT_OK

    if not hosts:
        print("No live hosts with open ports found.")
    for host in hosts:
        label = f" ({host.hostname})" if host.hostname else ""
        print(f"{host.ip_address}{label}")
        if host.os_guess:
            print(f"  OS: {host.os_guess}")
        if host.domain_name:
            print(f"  Domain: {host.domain_name}")
        for port in host.ports:
            details = " ".join(part for part in (port.service, port.version) if part)
            print(f"  {port.number}/{port.protocol}  {details}".rstrip())
    return EXIT_OK


def run_suggest(args: argparse.Namespace) -> int:
    hosts = _load_hosts(args)
    if hosts is None:
        return EXIT_INPUT_ERROR

    engine = _load_engine(args.rules)
    phase = normalize_phase(args.phase)

    report: list[dict[str, object]] = []
    for host in hosts:
        state = AssessmentState.build(
            current_phase=args.phase,
            acquired_items=args.items,
            open_ports=host.open_ports,
            services=host.services,
            target_os=args.target_os or host.os_guess,
        )
        context = RenderContext(
            ip=host.ip_address,
            domain=args.domain or host.domain_name,
            ip_range=args.ip_range,
            open_ports=tuple(host.open_ports),
        )
        vectors = [VectorResponse.from_applicable(item, context) for item in engine.evaluate(state)]
        if args.json:
            report.append(
                {
                    "ipAddress": host.ip_address,
                    "phase": phase.value,
                    "applicableVectors": [v.model_dump(by_alias=True) for v in vectors],
                }
            )
            continue
        print(f"{host.ip_address} [{phase.value}] {len(vectors)} applicable vector(s)")
        _print_vectors(vectors, ready=True)

    if args.json:
        _print_json(report)
    return EXIT_OK


def run_reference(args: argparse.Namespace) -> int:
    engine = _load_engine(args.rules)
    phase = normalize_phase(args.phase)
    items: list[ApplicableVector] = engine.vectors_for_phase(args.phase)
    vectors = [VectorResponse.from_applicable(item) for item in items]

    if args.json:
        _print_json(
            {
                "phase": phase.value,
                "vectors": [v.model_dump(by_alias=True) for v in vectors],
            }
        )
        return EXIT_OK

    print(f"{phase.value}: {len(vectors)} vector(s)")
    _print_vectors(vectors, ready=False)
    return EXIT_OK


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    logger.info("Serving the API on %s:%d", args.host, args.port)
    uvicorn.run("recon2report.main:app", host=args.host, port=args.port)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, stream=sys.stderr)

    if getattr(args, "text", False) and not args.ip:
        print("[!] --text requires --ip.", file=sys.stderr)
        return EXIT_USAGE

    if args.command == "parse":
        return run_parse(args)
    if args.command == "suggest":
        return run_suggest(args)
    if args.command == "reference":
        return run_reference(args)
    if args.command == "serve":
        return run_serve(args)

    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
