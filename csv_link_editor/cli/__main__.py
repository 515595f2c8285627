from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, apply_env_overrides, default_config, load_config
from ..csvio.codec import ParseError
from ..engine.errors import ValidationError
from ..engine.session import EditorSession
from ..logging.audit_log import AuditLogBuffer
from ..logging.init import log_summary, set_level, setup_logging
from ..models.config_models import EditorConfig
from ..services.relink import RelinkError, load_href_mapping, relink_session
from ..services.summary import render_summary_line

"""CLI entrypoint.

Sub-commands:
- serve:   run the REST API (Flask development server)
- inspect: load a CSV, print columns, row count and the first link rows
- relink:  rewrite hrefs from a YAML mapping, write the modified CSV and a
           JSON Lines audit log of every changed cell

Exit codes: 0 success, 1 fatal (bad config, unreadable or malformed input).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="csv-link-editor", description="Edit links in CSV documents")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the REST API server")
    serve.add_argument("--host", default=None, help="Bind address (overrides config)")
    serve.add_argument("--port", type=int, default=None, help="Port (overrides config)")

    inspect = sub.add_parser("inspect", help="Show columns and link rows of a CSV file")
    inspect.add_argument("csv", type=Path)
    inspect.add_argument("--columns", nargs="+", default=None, help="Link columns (default: from config)")
    inspect.add_argument("--limit", type=int, default=10, help="Number of link rows to print")

    relink = sub.add_parser("relink", help="Rewrite hrefs in link columns from a YAML mapping")
    relink.add_argument("csv", type=Path)
    relink.add_argument("--mapping", type=Path, required=True, help="YAML mapping of old href -> new href")
    relink.add_argument("--columns", nargs="+", default=None, help="Link columns (default: from config)")
    relink.add_argument("--output", type=Path, default=None, help="Output CSV (default: <name>-modified.csv)")
    relink.add_argument("--no-audit-log", action="store_true", help="Do not write logs/changes-*.log")
    return p.parse_args(argv)


def _resolve_config(path: Path | None) -> EditorConfig:
    """Explicit --config must exist; the default path is optional."""
    if path is not None:
        cfg = load_config(path)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = default_config()
    return apply_env_overrides(cfg)


def _load_session(path: Path, cfg: EditorConfig) -> EditorSession:
    session = EditorSession(header_rows=cfg.sheets.header_rows)
    session.load_document(path.read_text(encoding="utf-8"), path.name)
    return session


def _link_columns(args: argparse.Namespace, cfg: EditorConfig, session: EditorSession) -> list[str]:
    if args.columns:
        return list(args.columns)
    present = set(session.store.column_names)
    return [c for c in cfg.editor.default_link_columns if c in present]


def _serve(args: argparse.Namespace, cfg: EditorConfig, logger) -> int:
    from ..api.app import create_app

    app = create_app(cfg)
    host = args.host or cfg.server.host
    port = args.port or cfg.server.port
    logger.info(f"CSV link editor API running on http://{host}:{port}")
    app.run(host=host, port=port, debug=args.debug)
    return EXIT_SUCCESS


def _inspect(args: argparse.Namespace, cfg: EditorConfig, logger) -> int:
    session = _load_session(args.csv, cfg)
    columns = _link_columns(args, cfg, session)
    print(f"FILE: {args.csv.name}")
    print(f"  columns={session.store.column_names}")
    if columns:
        session.designate_link_columns(columns)
        rows = session.all_link_rows()
        print(f"  link_columns={columns} link_rows={len(rows)}")
        for position in rows[: max(args.limit, 0)]:
            hrefs = [link.href for col in columns for link in session.links_in_cell(position, col)]
            print(f"    row={position} hrefs={hrefs}")
    else:
        logger.warning("no link columns given and none of the default link columns are present")
    log_summary(render_summary_line(session.metadata())[len("SUMMARY "):])
    return EXIT_SUCCESS


def _relink(args: argparse.Namespace, cfg: EditorConfig, logger) -> int:
    mapping = load_href_mapping(args.mapping)
    session = _load_session(args.csv, cfg)
    columns = _link_columns(args, cfg, session)
    if not columns:
        logger.error("no link columns: pass --columns")
        return EXIT_FATAL
    result = relink_session(session, mapping, columns)

    output = args.output or args.csv.with_name(f"{args.csv.stem}-modified.csv")
    output.write_text(session.export_document(), encoding="utf-8")
    logger.info(f"wrote {output}")

    if not args.no_audit_log:
        path = AuditLogBuffer.from_changes(session.changes()).flush()
        if path is not None:
            logger.info(f"audit log: {path}")
    for href in result.unmatched:
        logger.debug(f"unmatched href: {href}")

    summary_line = render_summary_line(session.metadata(), result)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only reads sys.argv; an explicit [] must stay empty
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    set_level("DEBUG" if args.debug else cfg.logging.level)
    logger.debug("debug mode enabled")

    try:
        if args.command == "serve":
            return _serve(args, cfg, logger)
        if args.command == "inspect":
            return _inspect(args, cfg, logger)
        return _relink(args, cfg, logger)
    except FileNotFoundError as e:
        logger.error(f"file not found: {e.filename}")
        return EXIT_FATAL
    except ParseError as e:
        logger.error(f"parse: {e}")
        return EXIT_FATAL
    except (RelinkError, ValidationError) as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
