#!/usr/bin/env python3
"""
Sell Command Parser Script

Parses chat sell commands from the command line and prints the result as
JSON. With --product, --buyer and --seller it also prints the order payload
the command would create.

Usage:
    python parse_sell_command.py "sell 599 x2 10% off red medium cod"
    python parse_sell_command.py "sell 500 x2 10% off" --product p1 --buyer b1 --seller s1
    python parse_sell_command.py "sell 599" "sell 0" "hello"
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.order_projection_service import generate_order_from_command
from services.sell_command_parser import parse_sell_command


def describe(message: str, product: Optional[str], buyer: Optional[str], seller: Optional[str]) -> dict[str, Any]:
    """Parse one message and, when identifiers are given, project its order."""

    result = parse_sell_command(message)
    output: dict[str, Any] = {"message": message, "command": result.to_dict()}

    if result.is_valid and product and buyer and seller:
        output["order"] = generate_order_from_command(result, product, buyer, seller).to_dict()

    return output


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Parse chat sell commands")
    parser.add_argument("messages", nargs="+", help="Chat messages to parse")
    parser.add_argument("--product", help="Product ID for order projection")
    parser.add_argument("--buyer", help="Buyer ID for order projection")
    parser.add_argument("--seller", help="Seller ID for order projection")

    args = parser.parse_args(argv)

    ids = (args.product, args.buyer, args.seller)
    if any(ids) and not all(ids):
        parser.error("--product, --buyer and --seller must be given together")

    invalid = 0
    for message in args.messages:
        output = describe(message, *ids)
        if not output["command"]["is_valid"]:
            invalid += 1
        print(json.dumps(output, indent=2, ensure_ascii=False))

    return 1 if invalid else 0


if __name__ == "__main__":
    sys.exit(main())
