"""Serve the API with uvicorn.

Usage:
    python -m avalanchewatch.api                 # 0.0.0.0:3001
    python -m avalanchewatch.api --port 8080 -v  # custom port, debug logging
"""

import argparse
import logging
import os
import sys

DEFAULT_PORT = 3001


def main(argv=None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Serve the avalanche and weather API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", DEFAULT_PORT)),
        help=f"Port (default: $PORT or {DEFAULT_PORT})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output except errors")

    args = parser.parse_args(argv)

    # Configure logging
    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    import uvicorn

    from avalanchewatch.api.app import create_app

    app = create_app()
    logging.getLogger(__name__).info(f"Serving on {args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level=logging.getLevelName(level).lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
