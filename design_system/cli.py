"""
Command-line interface for the design system service.

Commands:
    serve          Run the HTTP service with uvicorn
    validate-data  Load and validate the dataset directory
    status         Print the configuration summary and check the data
    call           Run one tool call and print the JSON payload
"""

import argparse
import asyncio
import sys
from enum import Enum

import orjson

from design_system import __version__
from design_system.application.container import ServiceContainer
from design_system.core.config.settings import Settings, get_settings
from design_system.core.exceptions import ConfigurationError
from design_system.core.logging.logger import setup_logging
from design_system.data.data_manager import DataManager, DataManagerConfig


class ExitCode(Enum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2


def _print_json(payload) -> None:
    print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


def _settings_for(args: argparse.Namespace) -> Settings:
    """Global settings with command-line overrides applied."""
    overrides = {}
    if getattr(args, "data_path", None):
        overrides["DATA_PATH"] = args.data_path
    if getattr(args, "no_watch", False):
        overrides["ENABLE_FILE_WATCHING"] = False
    if getattr(args, "host", None):
        overrides["API_HOST"] = args.host
    if getattr(args, "port", None):
        overrides["API_PORT"] = args.port
    settings = get_settings()
    return settings.model_copy(update=overrides) if overrides else settings


def _one_shot_manager(settings: Settings) -> DataManager:
    data = settings.data
    return DataManager(
        DataManagerConfig(
            data_path=data.DATA_PATH,
            enable_file_watching=False,
            cache_timeout=data.CACHE_TIMEOUT,
            require_all_datasets=data.REQUIRE_ALL_DATASETS,
        )
    )


# ============================================================================
# Commands
# ============================================================================


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from design_system.application.app import create_app

    settings = _settings_for(args)
    uvicorn.run(
        create_app(settings),
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
    return ExitCode.SUCCESS.value


async def _validate(settings: Settings) -> int:
    manager = _one_shot_manager(settings)
    try:
        result = await manager.load_data()
        report = manager.validate_cached_data() if result.success else None
    finally:
        await manager.destroy()

    print(f"Data path: {manager.config.data_path}")
    if result.data is not None:
        for key, count in result.data.counts().items():
            print(f"  {key:<12} {count}")

    errors = list(result.errors) + (list(report.errors) if report and not report.valid else [])
    if errors:
        print(f"\n{len(errors)} problem(s) found:")
        for error in errors:
            print(f"  - {error}")
        return ExitCode.GENERAL_ERROR.value

    print("\nAll datasets are valid")
    return ExitCode.SUCCESS.value


def cmd_validate_data(args: argparse.Namespace) -> int:
    return asyncio.run(_validate(_settings_for(args)))


async def _status(settings: Settings) -> int:
    manager = _one_shot_manager(settings)
    try:
        result = await manager.load_data()
        data_status = manager.get_status()
    finally:
        await manager.destroy()

    cb = settings.circuit_breaker
    _print_json({
        "version": __version__,
        "environment": settings.app.ENVIRONMENT,
        "data": {
            "path": settings.data.DATA_PATH,
            "file_watching": settings.data.ENABLE_FILE_WATCHING,
            "cache_timeout_seconds": settings.data.CACHE_TIMEOUT,
            "require_all_datasets": settings.data.REQUIRE_ALL_DATASETS,
            "loaded": result.success,
            "counts": data_status["counts"],
            "errors": list(result.errors),
        },
        "circuit_breaker": {
            "failure_threshold": cb.CB_FAILURE_THRESHOLD,
            "recovery_timeout_seconds": cb.CB_RECOVERY_TIMEOUT,
            "request_timeout_seconds": cb.CB_REQUEST_TIMEOUT,
            "monitoring_period_seconds": cb.CB_MONITORING_PERIOD,
            "half_open_max_calls": cb.CB_HALF_OPEN_MAX_CALLS,
        },
        "api": {
            "host": settings.app.API_HOST,
            "port": settings.app.API_PORT,
            "base_path": settings.app.API_BASE_PATH,
        },
    })
    return ExitCode.SUCCESS.value if result.success else ExitCode.GENERAL_ERROR.value


def cmd_status(args: argparse.Namespace) -> int:
    return asyncio.run(_status(_settings_for(args)))


async def _call(settings: Settings, tool: str, arguments) -> int:
    container = ServiceContainer.from_settings(settings.model_copy(update={"ENABLE_FILE_WATCHING": False}))
    try:
        result = await container.initialize()
        if not result.success:
            raise ConfigurationError("DATA_PATH", f"initial data load failed: {'; '.join(result.errors)}")
        payload = await container.dispatcher.call_tool(tool, arguments)
    finally:
        await container.shutdown()

    _print_json(payload)
    return ExitCode.SUCCESS.value if payload["success"] else ExitCode.GENERAL_ERROR.value


def cmd_call(args: argparse.Namespace) -> int:
    try:
        arguments = orjson.loads(args.args) if args.args else {}
    except orjson.JSONDecodeError as exc:
        print(f"Invalid --args JSON: {exc}", file=sys.stderr)
        return ExitCode.USAGE_ERROR.value
    return asyncio.run(_call(_settings_for(args), args.tool, arguments))


# ============================================================================
# CLI Interface
# ============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="design-system-mcp",
        description="Design system data service (tokens, components, guidelines)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --port 8080
  %(prog)s validate-data --data-path ./data
  %(prog)s call get-design-token-details --args '{"name": "primary-blue"}'
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", help="Bind address (default: API_HOST)")
    serve.add_argument("--port", type=int, help="Bind port (default: API_PORT)")
    serve.add_argument("--data-path", help="Dataset directory (default: DATA_PATH)")
    serve.add_argument("--no-watch", action="store_true", help="Disable file watching")
    serve.set_defaults(handler=cmd_serve)

    validate = subparsers.add_parser("validate-data", help="Load and validate the dataset directory")
    validate.add_argument("--data-path", help="Dataset directory (default: DATA_PATH)")
    validate.set_defaults(handler=cmd_validate_data)

    status = subparsers.add_parser("status", help="Show configuration and data status")
    status.add_argument("--data-path", help="Dataset directory (default: DATA_PATH)")
    status.set_defaults(handler=cmd_status)

    call = subparsers.add_parser("call", help="Run one tool call and print the result")
    call.add_argument("tool", help="Tool name, e.g. search-design-tokens")
    call.add_argument("--args", metavar="JSON", help="Tool arguments as a JSON object")
    call.add_argument("--data-path", help="Dataset directory (default: DATA_PATH)")
    call.set_defaults(handler=cmd_call)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.verbose:
        level = "DEBUG"
    elif args.command == "serve":
        level = settings.logging.LOG_LEVEL
    else:
        level = "WARNING"
    setup_logging(log_level=level, log_format=settings.logging.LOG_FORMAT)

    try:
        return args.handler(args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return ExitCode.GENERAL_ERROR.value
    except ConfigurationError as exc:
        print(exc.user_message(), file=sys.stderr)
        return ExitCode.GENERAL_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
