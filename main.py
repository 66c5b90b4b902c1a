"""
Post Content Gateway

This is the main entry point for the gateway. It wires the shared token
manager, the content client and the HTTP application together and serves
them with uvicorn.
"""

import sys
import argparse
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from api.app import create_app
from config import settings
from services.content_client import ContentClient
from services.graphql_client import GraphQLClient
from services.token_manager import TokenManager
from utils.exceptions import ConfigurationError
from utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)


def build_app(graphql_client: Optional[GraphQLClient] = None) -> FastAPI:
    """
    Construct the services and the HTTP application.

    One TokenManager is created and shared by every request. Its initial
    token fetch may fail without stopping startup.

    Args:
        graphql_client: Transport to the upstream, a default client is created if omitted

    Returns:
        FastAPI: The ready-to-serve application
    """
    graphql_client = graphql_client or GraphQLClient()
    token_manager = TokenManager(graphql_client=graphql_client)
    content_client = ContentClient(token_manager, graphql_client=graphql_client)
    return create_app(token_manager, content_client)


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Post Content Gateway')
    parser.add_argument('--host', type=str, default=settings.HOST, help='Interface to bind')
    parser.add_argument('--port', type=int, default=settings.PORT, help='Port to listen on')
    parser.add_argument('--log-file', type=str, default=None, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=settings.LOG_LEVEL if settings.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR') else 'INFO',
                        help='Logging level')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the application."""
    args = parse_arguments(argv)

    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    try:
        settings.validate_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Configuration: {settings.get_config_summary()}")

    app = build_app()

    logger.info(f"Server starting on {args.host}:{args.port}...")
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
