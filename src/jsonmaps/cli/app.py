"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from jsonmaps import (
    ConfigError,
    DecodeError,
    FetchError,
    ReconcileError,
    RoutingError,
    SpecLoadError,
    SpecValidationError,
)


def main(argv: list[str] | None = None) -> int:
    import jsonmaps.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "validate":
            cli._run_validate(args)
        elif args.command == "stream":
            outcome = cli.asyncio.run(cli._run_stream(args))
            if not outcome.is_valid:
                return 3
        elif args.command == "load-table":
            cli.asyncio.run(cli._run_load_table(args))
        elif args.command == "serve":
            cli._run_serve(args)
        return 0
    except (ConfigError, SpecLoadError, SpecValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (FetchError, DecodeError, RoutingError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except ReconcileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
