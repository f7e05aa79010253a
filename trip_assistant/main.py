"""
Main entry point for the Trip Assistant service.

Runs the FastAPI application under uvicorn:

    python -m trip_assistant.main --port 5000 --storage dynamodb
"""

import argparse
import os
import sys

import uvicorn

from trip_assistant.config import StorageBackend, TripAssistantConfig, initialize_config
from trip_assistant.data.dynamodb import DynamoDBClient
from trip_assistant.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

APP_FACTORY = "trip_assistant.api.app:create_app"


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up the argument parser for the CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        description="AI trip planning service powered by Google Gemini"
    )

    server_group = parser.add_argument_group("Server")
    server_group.add_argument("--host", type=str, default="0.0.0.0", help="Bind address")
    server_group.add_argument(
        "--port", type=int, default=int(os.getenv("PORT", "5000")), help="Bind port"
    )
    server_group.add_argument(
        "--reload", action="store_true", help="Reload on code changes (development)"
    )

    system_group = parser.add_argument_group("System Configuration")
    system_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (defaults to LOG_LEVEL)",
    )
    system_group.add_argument(
        "--log-file", type=str, help="Path to write log file (optional)"
    )
    system_group.add_argument(
        "--env-file", type=str, help="Path to a custom .env configuration file"
    )
    system_group.add_argument(
        "--storage",
        type=str,
        choices=[backend.value for backend in StorageBackend],
        default=None,
        help="Repository backing (defaults to STORAGE_BACKEND)",
    )
    system_group.add_argument(
        "--create-table",
        action="store_true",
        help="Create the DynamoDB table if it doesn't exist",
    )
    return parser


def create_table(config: TripAssistantConfig) -> None:
    """Create the DynamoDB table for local development."""
    db = DynamoDBClient(
        table_name=config.api.dynamodb_table_name,
        region=config.api.aws_region,
        endpoint_url=config.api.dynamodb_endpoint,
    )
    db.create_table_if_not_exists()


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point function.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = setup_argparse().parse_args(argv)
    setup_logging(log_level=args.log_level or "INFO", log_file=args.log_file)

    # The app factory reads the environment, also in a reloader subprocess
    if args.storage:
        os.environ["STORAGE_BACKEND"] = args.storage

    try:
        config = initialize_config(custom_config_path=args.env_file, validate=True)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    if args.storage:
        config.system.storage_backend = StorageBackend(args.storage)

    setup_logging(
        log_level=args.log_level or config.system.log_level, log_file=args.log_file
    )

    if args.create_table:
        try:
            create_table(config)
        except Exception as e:
            logger.error(f"Failed to create DynamoDB table: {e!s}")
            return 1

    logger.info(
        f"Starting Trip Assistant on {args.host}:{args.port} "
        f"(storage={config.system.storage_backend.value})"
    )
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=(args.log_level or config.system.log_level.value).lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
