# main.py

"""Entry point for the storefront (TUI, headless CLI or JSON API)."""

import argparse
import logging
import sys

from storefront.config.logging_config import setup_logging
from storefront.config.settings import Settings

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    sortable = ", ".join(Settings.SORTABLE_FIELDS)

    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Product catalog browser backed by Firestore.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    sub = parser.add_subparsers(dest="command")

    list_cmd = sub.add_parser("list", help="List one page of products.")
    list_cmd.add_argument("-c", "--category", default=None)
    list_cmd.add_argument("-s", "--search", default=None)
    list_cmd.add_argument(
        "--sort",
        default=None,
        dest="sort_by",
        help=f"Sort field ({sortable}).",
    )
    list_cmd.add_argument("--order", choices=["asc", "desc"], default=None)
    list_cmd.add_argument(
        "-n", "--page-size", type=int, default=None, dest="page_size"
    )
    list_cmd.add_argument(
        "--cursor",
        default=None,
        help="Cursor token printed by a previous call.",
    )
    list_cmd.add_argument(
        "--prev",
        action="store_true",
        default=False,
        help="Walk backwards from --cursor.",
    )
    _add_format(list_cmd)

    show_cmd = sub.add_parser("show", help="Show one product with reviews.")
    show_cmd.add_argument("product_id")
    _add_format(show_cmd)

    sub.add_parser("categories", help="List product categories.")

    count_cmd = sub.add_parser("count", help="Count products.")
    count_cmd.add_argument("-c", "--category", default=None)

    seed_cmd = sub.add_parser("seed", help="Upload a catalog JSON file.")
    seed_cmd.add_argument("path")

    serve_cmd = sub.add_parser("serve", help="Run the JSON API server.")
    serve_cmd.add_argument("--host", default=None)
    serve_cmd.add_argument("--port", type=int, default=None)
    return parser


def _add_format(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from storefront.ui.app import StorefrontApp

    try:
        app = StorefrontApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_command(args: argparse.Namespace) -> int:
    """Dispatch a headless subcommand and return its exit code."""
    from storefront.cli import runner
    from storefront.store.errors import QueryError

    if args.command == "list":
        try:
            query = runner.build_query(
                category=args.category,
                search=args.search,
                sort_by=args.sort_by,
                order=args.order,
                page_size=args.page_size,
                cursor_token=args.cursor,
                backwards=args.prev,
            )
            query.validate()
        except QueryError as exc:
            sys.stderr.write(f"Invalid query: {exc}\n")
            return 2
        return runner.cli_list(query, args.output_format)
    if args.command == "show":
        return runner.cli_show(args.product_id, args.output_format)
    if args.command == "categories":
        return runner.cli_categories()
    if args.command == "count":
        return runner.cli_count(args.category)
    if args.command == "seed":
        return runner.run_seed(args.path)
    if args.command == "serve":
        return runner.run_server(args.host, args.port)
    raise ValueError(f"Unknown command: {args.command}")


def main() -> None:
    """Route to the TUI (no command) or a headless subcommand."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        _run_tui()
    else:
        sys.exit(_run_command(args))


if __name__ == "__main__":
    main()
