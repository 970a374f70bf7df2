#!/usr/bin/env python3
"""
ClearCause Notification Mailer - command line entry point.

Usage:
    python main.py serve
    python main.py dispatch <notification_id>
"""

import argparse
import json
import logging
import sys
import uuid

from database.database import Database
from database.repositories import NotificationRepository
from notification import NotificationDispatcher, build_email_channel, build_insert_event
from web.backend.config import get_config

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def serve(args) -> int:
    """Run the webhook server."""
    import uvicorn

    config = get_config()
    host = args.host or config.web.host
    port = args.port or config.web.port

    logger.info(f"Starting notification mailer on {host}:{port}")
    logger.info(f"Webhook: http://{host}:{port}/functions/v1/send-email")
    logger.info(f"API Docs: http://{host}:{port}/docs")

    uvicorn.run(
        "web.backend.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=False,
        log_level="info"
    )
    return 0


def dispatch(args) -> int:
    """
    Run an existing notification through the pipeline again.

    Used by operators to redeliver a notification whose webhook failed.
    """
    try:
        notification_id = uuid.UUID(args.notification_id)
    except ValueError:
        logger.error(f"Invalid notification id: {args.notification_id}")
        return 2

    config = get_config()
    database = Database(config.database.url)
    channel = build_email_channel(config.email)

    try:
        with database.session_scope() as session:
            repo = NotificationRepository(session)
            row = repo.get_notification(notification_id)
            if row is None:
                logger.error(f"Notification {notification_id} not found")
                return 1

            dispatcher = NotificationDispatcher(repo, channel, app_name=config.email.app_name)
            result = dispatcher.dispatch(build_insert_event(row.to_record()))
    finally:
        database.dispose()

    print(json.dumps({
        'notification_id': str(notification_id),
        'status': result.status.value,
        'http_status': result.http_status,
        'reason': result.reason,
    }))
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ClearCause notification mailer")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    subparsers = parser.add_subparsers(dest='command', required=True)

    serve_parser = subparsers.add_parser('serve', help="Run the webhook server")
    serve_parser.add_argument('--host', default=None, help="Bind address (default: config web.host)")
    serve_parser.add_argument('--port', type=int, default=None, help="Port (default: config web.port)")
    serve_parser.set_defaults(func=serve)

    dispatch_parser = subparsers.add_parser('dispatch', help="Redeliver an existing notification")
    dispatch_parser.add_argument('notification_id', help="Notification UUID")
    dispatch_parser.set_defaults(func=dispatch)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
