from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from opportunity_client.config import AppConfig, ConfigError, load_config
from opportunity_client.controllers import (
    CreateSubmissionController,
    FetchStatus,
    ListSyncController,
    OptionsStatus,
    SubmitStatus,
)
from opportunity_client.logging_config import setup_logging
from opportunity_client.remote import HttpRemoteClient, RemoteClient
from opportunity_client.rendering import render_opportunity_list, render_options

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opportunity-client",
        description="List and create opportunities against the opportunity API.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config YAML file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        help="Override config log level (e.g. INFO, DEBUG)",
    )
    parser.add_argument(
        "--base-url",
        help="Override the API base address from config",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print opportunities")
    list_parser.add_argument(
        "--new",
        action="store_true",
        help="Only show new opportunities",
    )

    subparsers.add_parser("options", help="Print available stage names and accounts")

    create = subparsers.add_parser("create", help="Create a new opportunity")
    create.add_argument("--name", required=True)
    create.add_argument("--amount", required=True)
    create.add_argument("--stage", required=True, dest="stage_name")
    create.add_argument("--close-date", required=True, help="Close date (YYYY-MM-DD)")
    create.add_argument("--account", required=True, dest="account_id", help="Account Id")
    create.add_argument("--description", default="")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    if args.base_url:
        app_config.api.base_url = args.base_url.rstrip("/")

    log_level = args.log_level or app_config.log_level
    setup_logging(log_level)

    client = _build_client(app_config)

    if args.command == "list":
        return asyncio.run(_run_list(client, new_only=args.new))
    if args.command == "options":
        return asyncio.run(_run_options(client))

    fields = {
        "name": args.name,
        "amount": args.amount,
        "stage_name": args.stage_name,
        "close_date": args.close_date,
        "account_id": args.account_id,
        "description": args.description,
    }
    return asyncio.run(_run_create(client, fields))


def _build_client(app_config: AppConfig) -> RemoteClient:
    logger.debug("Using API at %s", app_config.api.base_url)
    return HttpRemoteClient.from_settings(app_config.api)


async def _run_list(client: RemoteClient, *, new_only: bool) -> int:
    controller = ListSyncController(client)
    state = await controller.set_filter(new_only)

    if state.status is not FetchStatus.SUCCESS:
        print(f"Error: {state.error_message}", file=sys.stderr)
        return 1

    print(render_opportunity_list(state.data))
    return 0


async def _run_options(client: RemoteClient) -> int:
    controller = CreateSubmissionController(client)
    state = await controller.activate()

    if state.options_status is not OptionsStatus.READY:
        print(state.options_error, file=sys.stderr)
        return 1

    print(render_options(state.stage_names, state.accounts))
    return 0


async def _run_create(client: RemoteClient, fields: dict[str, str]) -> int:
    controller = CreateSubmissionController(client)
    state = await controller.activate()

    if state.options_status is not OptionsStatus.READY:
        print(state.options_error, file=sys.stderr)
        return 1

    for name, value in fields.items():
        controller.update_field(name, value)

    await controller.submit()
    state = controller.state

    if state.submit_status is not SubmitStatus.SUCCESS:
        print(f"Error: {state.submit_error}", file=sys.stderr)
        return 1

    print(f"Created opportunity: {fields['name']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
