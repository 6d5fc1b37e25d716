from __future__ import annotations

import argparse
import json
import logging
from typing import Optional, Sequence

from .config import AppConfig
from .errors import PricingError
from .models import NoData
from .scheduler import build_scheduler
from .services import build_services


# ---------- Logging ----------

def enable_logging(level: int | str = logging.INFO) -> None:
    """Configure root logger with a simple, useful format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


# ---------- CLI ----------

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="azure-prices",
        description="Azure Retail Prices export: fetch, convert to CSV and upload.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("fetch-upload", help="Fetch all pages and upload the raw CSV export.")
    p.add_argument("--start-url", help="First page URL (default: AZURE_PRICING_START_URL).")

    sub.add_parser("process", help="Build and upload the processed export from the static source.")

    p = sub.add_parser("estimate", help="Cheapest positive price for a product/region times quantity.")
    p.add_argument("--product", required=True, help="Exact productName, e.g. 'Virtual Machines Dv3 Series'")
    p.add_argument("--region", required=True, help="ARM region name, e.g. eastus")
    p.add_argument("--quantity", default="1", help="Quantity to multiply the unit price by (default: 1)")

    sub.add_parser("products", help="List distinct product names.")

    p = sub.add_parser("regions", help="List regions for one product.")
    p.add_argument("--product", required=True)

    p = sub.add_parser("serve", help="Run the REST API.")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8080)

    sub.add_parser("schedule", help="Run the periodic raw export in the foreground.")
    return ap.parse_args(argv)


def _print_json(obj) -> None:
    print(json.dumps(obj, indent=2, default=str))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        config = AppConfig.from_env()
    except (KeyError, ValueError) as e:
        logging.error("Invalid configuration: %s", e)
        return 2
    enable_logging(config.log_level)

    if args.command == "serve":
        import uvicorn

        from .web import create_app

        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return 0

    services = build_services(config)
    try:
        if args.command == "fetch-upload":
            s = services.pipeline.run(args.start_url)
            _print_json({"message": s.message, "destinationURI": s.destination_uri, "recordCount": s.record_count})
        elif args.command == "process":
            print(services.pipeline.run_processed())
        elif args.command == "estimate":
            result = services.estimator.estimate(args.product, args.region, args.quantity)
            if isinstance(result, NoData):
                print(result.message)
            else:
                _print_json({
                    "product": result.product,
                    "region": result.region,
                    "unitPrice": result.unit_price,
                    "quantity": result.quantity,
                    "currency": result.currency,
                    "estimatedCost": result.estimated_cost,
                })
        elif args.command == "products":
            _print_json(services.estimator.list_products())
        elif args.command == "regions":
            _print_json(services.estimator.list_regions(args.product))
        elif args.command == "schedule":
            scheduler = build_scheduler(
                services.pipeline, config.schedule.interval_seconds, blocking=True
            )
            try:
                scheduler.start()
            except (KeyboardInterrupt, SystemExit):
                logging.info("Scheduler stopped")
    except PricingError as e:
        logging.error("%s: %s", e.kind, e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
