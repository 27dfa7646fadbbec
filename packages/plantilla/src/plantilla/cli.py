"""CLI tool for roster reconciliation and diagnostics."""

import argparse
import sys

import pandas as pd
import structlog

from plantilla.config import MatchConfig
from plantilla.diagnostics import explain, find_by_surname, roster_by_destino
from plantilla.io import read_records, result_to_row
from plantilla.logging import configure_logging
from plantilla.matcher import Matcher
from plantilla.roster import Roster, RosterLoadError, load_roster
from plantilla.status import (
    ESTADO_LABELS,
    FILTRO_TODOS,
    ClassificationSummary,
    filter_by_estado,
    summarize,
)
from plantilla.types import ESTADOS, RosterEntry, UserIdentityRecord


def _build_config(args: argparse.Namespace) -> MatchConfig:
    """Build a MatchConfig from CLI args."""
    config = MatchConfig()
    if getattr(args, "min_similarity", None) is not None:
        config.thresholds.min_similarity = args.min_similarity
    if getattr(args, "top", None) is not None:
        config.diagnostics.top_n = args.top
    return config


def _load(args: argparse.Namespace) -> Roster:
    try:
        return load_roster(args.roster)
    except RosterLoadError as e:
        structlog.get_logger().error("roster_unavailable", error=str(e))
        sys.exit(2)


def _entries_frame(entries: list[RosterEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"nombre": e.nombre, "apellidos": e.apellidos, "categoria": e.categoria, "destino": e.destino}
            for e in entries
        ],
        columns=["nombre", "apellidos", "categoria", "destino"],
    )


def cmd_check(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    roster = _load(args)
    config = _build_config(args)

    records = read_records(args.file)
    log.info("records_loaded", path=args.file, count=len(records))

    results = Matcher(roster, config).classify_all(records)
    visible = filter_by_estado(zip(records, results), args.estado)

    _print_summary(summarize(results))

    if args.show:
        df = pd.DataFrame([result_to_row(rec, res) for rec, res in visible])
        label = "todos" if args.estado == FILTRO_TODOS else ESTADO_LABELS[args.estado]
        print(f"\n=== {label} ({len(visible)}) ===")
        if df.empty:
            print("  No records.")
        else:
            print(df.to_string(index=False))


def _print_summary(summary: ClassificationSummary) -> None:
    print(f"Records: {summary.total}")
    for estado in ESTADOS:
        print(f"  {ESTADO_LABELS[estado]}: {summary.por_estado[estado]}")


def cmd_debug(args: argparse.Namespace) -> None:
    roster = _load(args)
    config = _build_config(args)
    record = UserIdentityRecord(
        nombre=args.nombre,
        apellidos=args.apellidos,
        destino=args.destino,
        categoria=args.categoria,
    )
    exp = explain(record, roster, config)

    print(f"Input:      nombre={args.nombre!r} apellidos={args.apellidos or ''!r}")
    print(f"Normalized: nombre={exp.nombre!r} apellidos={exp.apellidos!r}")
    print(f"Tokens:     [{', '.join(exp.tokens)}]")
    print(f"\nCandidates ({len(exp.candidatos)}):")
    for i, c in enumerate(exp.candidatos, 1):
        flag = "ok" if c.supera_umbral else "--"
        pairs = ", ".join(f"{a}~{b}" for a, b in c.pares)
        print(f"  {i}. [{flag}] {c.similitud:.0%} {c.entry.nombre_completo} ({c.entry.destino})")
        print(f"     matches: {pairs}")

    r = exp.resultado
    print(f"\nResult: {ESTADO_LABELS[r.estado]}")
    if r.coincidencia is not None:
        print(f"  {r.coincidencia.nombre_completo} / {r.coincidencia.destino} / {r.coincidencia.categoria}")
    for d in r.diferencias or ():
        print(f"  {d.campo}: {d.valor!r} (oficial: {d.valor_oficial!r})")


def cmd_roster(args: argparse.Namespace) -> None:
    roster = _load(args)
    stats = roster.stats()
    print(f"Total: {stats.total}")
    if stats.fecha_actualizacion:
        print(f"Updated: {stats.fecha_actualizacion}")

    for destino, entries in roster_by_destino(roster).items():
        if args.destino and destino != args.destino:
            continue
        print(f"\n=== {destino} ({len(entries)}) ===")
        print(_entries_frame(entries).drop(columns=["destino"]).to_string(index=False))


def cmd_surname(args: argparse.Namespace) -> None:
    roster = _load(args)
    found = find_by_surname(roster, args.fragment)
    print(f"=== Surname matching '{args.fragment}' ({len(found)} results) ===")
    if found:
        print(_entries_frame(found).to_string(index=False))
    else:
        print("  No matches found.")


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the HTTP diagnostics server."""
    import uvicorn

    from plantilla.server import create_app

    log = structlog.get_logger()
    roster = _load(args)
    app = create_app(roster, _build_config(args))

    log.info("server_start", host=args.host, port=args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


def _global_options(with_defaults: bool) -> argparse.ArgumentParser:
    """Parent parser with the options accepted before or after the subcommand.

    Subcommand copies suppress their defaults so they never overwrite a value
    given before the subcommand name.
    """
    def default(value):
        return value if with_defaults else argparse.SUPPRESS

    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=default("WARNING"),
        help="Set logging level (default: WARNING)",
    )
    parent_parser.add_argument(
        "--roster",
        default=default(None),
        help="Path to roster JSON (default: $PLANTILLA_ROSTER or config_data/plantilla.json)",
    )
    parent_parser.add_argument(
        "--min-similarity",
        type=float,
        default=default(None),
        help="Minimum similarity to accept a roster match (default: 0.5)",
    )
    return parent_parser


def main(argv: list[str] | None = None) -> None:
    parent_parser = _global_options(with_defaults=False)
    parser = argparse.ArgumentParser(
        description="Roster reconciliation CLI",
        parents=[_global_options(with_defaults=True)],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", parents=[parent_parser], help="Classify a file of user records")
    check_parser.add_argument("file", help="CSV or JSONL with nombre, apellidos, destino, categoria, id")
    check_parser.add_argument("--estado", choices=[FILTRO_TODOS, *ESTADOS], default=FILTRO_TODOS, help="Only show records in this state")
    check_parser.add_argument("--show", action="store_true", help="Display classified records on screen")
    check_parser.set_defaults(func=cmd_check)

    debug_parser = subparsers.add_parser("debug", parents=[parent_parser], help="Explain the search for one person")
    debug_parser.add_argument("nombre")
    debug_parser.add_argument("apellidos", nargs="?", default=None)
    debug_parser.add_argument("--destino", default=None)
    debug_parser.add_argument("--categoria", default=None)
    debug_parser.add_argument("--top", type=int, default=None, help="Number of candidates to show (default: 5)")
    debug_parser.set_defaults(func=cmd_debug)

    roster_parser = subparsers.add_parser("roster", parents=[parent_parser], help="List roster grouped by destino")
    roster_parser.add_argument("--destino", default=None, help="Only list this destino")
    roster_parser.set_defaults(func=cmd_roster)

    surname_parser = subparsers.add_parser("surname", parents=[parent_parser], help="Search roster by surname fragment")
    surname_parser.add_argument("fragment")
    surname_parser.set_defaults(func=cmd_surname)

    serve_parser = subparsers.add_parser("serve", parents=[parent_parser], help="Run the HTTP diagnostics server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8765, help="Server port (default: 8765)")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
