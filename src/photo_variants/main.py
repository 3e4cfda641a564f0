"""Main module for the photo variants CLI."""

import argparse
import json
import sys
from typing import Optional, Sequence

from . import __version__
from .core.config import PipelineSettings
from .core.exceptions import ConfigurationError, FetchError, ValidationError
from .core.logging_config import setup_logger
from .processors import EXECUTOR_NAMES


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="photo-variants",
        description="Photo Variants - resized WebP variants and BlurHash placeholders for uploaded photos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process one uploaded photo
  photo-variants process --photo-id 42 --bucket photos --path abc123/beach.jpg

  # Render variants on a thread pool
  photo-variants process --photo-id 42 --bucket photos --path abc123/beach.jpg \\
                         --executor multithread

  # Run the HTTP endpoint
  photo-variants serve --port 8000
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser(
        "process", help="Derive variants and placeholder for one photo"
    )
    process_parser.add_argument("--photo-id", required=True, help="Photo record id")
    process_parser.add_argument("--bucket", required=True, help="Bucket holding the original")
    process_parser.add_argument("--path", required=True, help="Storage path of the original")
    process_parser.add_argument(
        "--executor",
        type=str,
        default=None,
        choices=list(EXECUTOR_NAMES),
        help="Variant execution strategy (default: PHOTO_VARIANTS_EXECUTOR or serial)",
    )
    process_parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP endpoint")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    subparsers.add_parser("version", help="Show version information")

    return parser


def run_process(args: argparse.Namespace) -> int:
    """Run the pipeline once and print the JSON result. Returns the exit code."""
    from .core.factories import ProcessingPipelineFactory

    settings = PipelineSettings.from_env()
    overrides = {}
    if args.executor:
        overrides["executor"] = args.executor
    if args.debug:
        overrides["debug"] = True
        setup_logger(level="DEBUG")
    if overrides:
        settings = settings.model_copy(update=overrides)

    pipeline = ProcessingPipelineFactory.create_pipeline(settings=settings)

    try:
        result = pipeline.process_image(
            {"photoId": args.photo_id, "bucket": args.bucket, "path": args.path}
        )
    except (ValidationError, FetchError) as exc:
        print(json.dumps({"success": False, "message": str(exc)}, indent=2))
        return 1

    print(json.dumps(result.to_response(), indent=2))
    return 0 if result.success else 1


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the ``photo-variants`` command."""
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "process":
        try:
            sys.exit(run_process(args))
        except ConfigurationError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            sys.exit(2)

    elif args.command == "serve":
        sys.exit(run_serve(args))

    elif args.command == "version":
        print("Photo Variants CLI")
        print(f"Version {__version__}")
        print("Resized WebP variants and BlurHash placeholders for uploaded photos")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
