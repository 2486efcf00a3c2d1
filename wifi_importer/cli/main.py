from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, ImportConfig, load_config
from ..csvio.reader import read_csv_preview
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import enable_debug, log_summary, setup_logging
from ..registration import build_channel, build_registrar
from ..services.dispatcher import BatchDispatcher, DispatcherState, DispatchStatus
from ..services.pipeline import import_and_register
from ..services.progress import DispatchProgress
from ..services.summary import (
    render_dispatch_message,
    render_import_message,
    render_summary_line,
)

"""CLI entrypoint.

Modes:
- import (default): parse + validate the CSV and register every valid
  network in one bulk call
- dispatch: forward valid networks to the chunked channel 5 at a time until
  all of them have been sent (optionally pausing between batches)

A SUMMARY line is always printed. Individual errors are written to the error
log and only echoed with --show-errors.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (its values win over the process env)."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Wi-Fi network CSV importer")
    p.add_argument("csv", nargs="?", help="CSV file (ssid,password,security type)")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/import.yml)")
    p.add_argument(
        "--mode",
        choices=("import", "dispatch"),
        default="import",
        help="import: one bulk registration; dispatch: batches of 5",
    )
    p.add_argument("--pause", action="store_true", help="dispatch: wait for Enter between batches")
    p.add_argument("--show-errors", action="store_true", help="Print every error after the summary")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print CSV header & first rows then exit")
    return p.parse_args(argv)


def _print_errors(errors: list[str]) -> None:
    if errors:
        print("Import Errors:")
        for line in errors:
            print(f"  {line}")


def _inspect_data(csv_path: Path, cfg: ImportConfig) -> int:
    try:
        df = read_csv_preview(csv_path, encoding=cfg.encoding)
    except (OSError, ValueError) as e:
        # pandas の EmptyDataError / ParserError は ValueError 派生
        print(f"inspect: read_error: {e}")
        return EXIT_FATAL
    print(f"FILE: {csv_path.name} cols={list(df.columns)}")
    print("  sample_rows=", df.to_dict(orient="records"))
    return EXIT_SUCCESS_ALL


def _run_import(csv_path: Path, cfg: ImportConfig, args: argparse.Namespace, error_log: ErrorLogBuffer) -> int:
    logger = setup_logging()
    registrar = build_registrar(cfg)
    if not registrar.is_available():
        logger.error(f"backend '{cfg.backend}' is not available on this system")
        return EXIT_FATAL

    result = import_and_register(csv_path, registrar, encoding=cfg.encoding, error_log=error_log)
    logger.info(render_import_message(result))
    # log_summary が "SUMMARY " を付与するため除去
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    if args.show_errors:
        _print_errors(list(result.errors))
    return EXIT_PARTIAL_FAILURE if result.has_failures else EXIT_SUCCESS_ALL


def _run_dispatch(csv_path: Path, cfg: ImportConfig, args: argparse.Namespace, error_log: ErrorLogBuffer) -> int:
    logger = setup_logging()
    channel = build_channel(cfg)
    if not channel.is_available():
        logger.error(f"backend '{cfg.backend}' is not available on this system")
        return EXIT_FATAL

    dispatcher = BatchDispatcher(channel)
    first = dispatcher.dispatch(csv_path, encoding=cfg.encoding, error_log=error_log)
    errors = [e.display for e in first.errors]
    logger.info(render_dispatch_message(first))

    dispatched = 0
    if first.status is DispatchStatus.BATCH_SENT:
        with DispatchProgress(dispatcher.total) as progress:
            progress.advance(len(first.batch), first.remaining)
            while True:
                if args.pause and dispatcher.state is DispatcherState.LOADED:
                    try:
                        input("Press Enter to send the next batch...")
                    except EOFError:
                        logger.info("input closed, stopping dispatch")
                        break
                outcome = dispatcher.dispatch(csv_path, encoding=cfg.encoding, error_log=error_log)
                logger.info(render_dispatch_message(outcome))
                if outcome.status is not DispatchStatus.BATCH_SENT:
                    break
                progress.advance(len(outcome.batch), outcome.remaining)
            dispatched = progress.sent

    log_summary(f"dispatched={dispatched} errors={len(errors)}")
    if args.show_errors:
        _print_errors(errors)
    return EXIT_PARTIAL_FAILURE if errors else EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: [] が渡された場合に sys.argv[1:] (pytest の引数) を読まないよう None のみ判定
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        enable_debug()

    csv_value = args.csv or cfg.csv_file
    if not csv_value:
        logger.error("no CSV file given (argument or csv_file in config)")
        return EXIT_FATAL
    csv_path = Path(csv_value)

    if args.inspect_data:
        return _inspect_data(csv_path, cfg)

    logger.info(f"Processing {csv_path} (mode={args.mode} backend={cfg.backend})")
    error_log = ErrorLogBuffer(Path(cfg.error_log_dir))
    try:
        if args.mode == "dispatch":
            code = _run_dispatch(csv_path, cfg, args, error_log)
        else:
            code = _run_import(csv_path, cfg, args, error_log)
    finally:
        try:
            log_path = error_log.flush()
        except OSError as e:
            # エラーログ書き込み失敗で全体を失敗にしない
            logger.warning(f"failed to write error log: {e}")
            log_path = None
    if log_path is not None:
        logger.info(f"error details: {log_path}")
    return code
