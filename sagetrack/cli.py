"""
sagetrack command line.

Example:
  sagetrack --region us-west-2 --kind endpoint --kind notebook --timeout 60

Prints the inventory report as JSON on stdout; surfaced errors go to stderr.
Exit codes: 0 ok, 1 errors, 2 AWS configuration not usable.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from sagetrack.services.inventory import InventoryService
from sagetrack.shared.adapters.sagemaker import SageMakerInventoryAdapter
from sagetrack.shared.core.config import Settings, get_settings
from sagetrack.shared.core.constants import ResourceKind
from sagetrack.shared.core.error_tracker import get_error_tracker
from sagetrack.shared.core.exceptions import SagetrackException
from sagetrack.shared.core.logging import setup_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNCONFIGURED = 2


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sagetrack",
        description="List active SageMaker endpoints, notebook instances and Studio apps.",
    )
    parser.add_argument(
        "--region",
        dest="region",
        default=None,
        help="AWS region (defaults to the AWS SDK resolution chain)",
    )
    parser.add_argument(
        "--kind",
        dest="kinds",
        action="append",
        choices=[kind.value for kind in ResourceKind],
        default=None,
        help="Resource kind to list; repeat for several (default: all)",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout",
        type=float,
        default=None,
        help="Deadline in seconds for the whole inventory run",
    )
    parser.add_argument(
        "--debug",
        dest="debug",
        action="store_true",
        help="Human-readable debug logging on stderr",
    )
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    tracker = get_error_tracker()
    kinds = [ResourceKind(kind) for kind in args.kinds] if args.kinds else None
    timeout = args.timeout if args.timeout is not None else settings.INVENTORY_TIMEOUT_SECONDS

    try:
        async with SageMakerInventoryAdapter.connect(args.region, settings=settings) as adapter:
            report = await InventoryService(adapter, tracker).collect(kinds, timeout=timeout)
    except SagetrackException as exc:
        surfaced = tracker.track(exc)
        if surfaced is not None:
            print(f"Error: {surfaced}", file=sys.stderr)
        return EXIT_ERROR

    print(report.model_dump_json(indent=2))
    if not report.configured:
        return EXIT_UNCONFIGURED

    for kind, message in sorted(report.errors.items()):
        print(f"Error listing {kind}: {message}", file=sys.stderr)
    return EXIT_ERROR if report.errors else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    if args.debug:
        settings = settings.model_copy(update={"DEBUG": True})
    setup_logging(settings)
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
