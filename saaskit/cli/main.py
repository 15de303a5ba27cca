"""Main CLI entry point for saaskit."""

import argparse
import json
import logging
import sys

from saaskit.core import (
    AuthMethod,
    ConfigError,
    ProductCategory,
    ProductDefinition,
    ProductNotFoundError,
    add_product,
    resolve_token,
    save_product,
    set_base_url,
)
from saaskit.client import (
    APIError,
    available_products,
    create_client,
    credentials_for,
    resolve_product,
)
from saaskit.products import AdapterNotFoundError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    # Suppress httpx INFO logs for cleaner output
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_key_values(pairs: list[str] | None) -> dict[str, str]:
    """
    Parse ``key=value`` strings into a dict.

    Raises:
        ValueError: If a pair has no '='
    """
    result = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Expected key=value, got '{pair}'")
        key, value = pair.split("=", 1)
        result[key.strip()] = value.strip()
    return result


def non_negative_int(value: str) -> int:
    """argparse type for --limit."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {number}")
    return number


def fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def cmd_register(args):
    """Handle the register command."""
    product = ProductDefinition(
        product_id=args.id,
        name=args.name,
        category=ProductCategory(args.category),
        base_url=args.base_url,
        auth_method=AuthMethod(args.auth),
    )
    try:
        path = save_product(product)
    except ConfigError as e:
        fail(f"could not register product: {e}")

    add_product(product)
    print(f"Successfully registered product '{product.product_id}' ({product.name})")
    print(f"Configuration saved to: {path}")


def cmd_set_url(args):
    """Handle the set-url command."""
    try:
        resolve_product(args.id)
        path = set_base_url(args.id, None if args.reset else args.base_url)
    except (ProductNotFoundError, ConfigError) as e:
        fail(str(e))

    if args.reset:
        print(f"Base URL override for '{args.id}' removed")
    else:
        print(f"'{args.id}' now uses {args.base_url.rstrip('/')}")
    print(f"Configuration saved to: {path}")


def cmd_list(args):
    """Handle the list command."""
    try:
        products = available_products()
    except ConfigError as e:
        fail(str(e))

    print(f"Known products ({len(products)}):")
    print()
    for product in products:
        print(f"  ID:       {product.product_id}")
        print(f"  Name:     {product.name}")
        print(f"  Category: {product.category.value}")
        print(f"  Base URL: {product.base_url}")
        print(f"  Auth:     {product.auth_method.value}")
        print()


def cmd_fetch(args):
    """Handle the fetch command - stream a listing as JSON lines."""
    try:
        params = parse_key_values(args.param)
        product_def = resolve_product(args.id)
        token = resolve_token(args.id, args.token)
    except (ValueError, ProductNotFoundError, ConfigError) as e:
        fail(str(e))

    if args.limit == 0:
        logger.info("Limit is 0; nothing fetched")
        return

    try:
        client = create_client(product_def.product_id, credentials_for(product_def, token))
    except AdapterNotFoundError as e:
        fail(str(e))

    count = 0
    with client:
        items = client.list_stream(args.path, params=params)
        try:
            for item in items:
                print(json.dumps(item))
                count += 1
                if args.limit is not None and count >= args.limit:
                    break
        except APIError as e:
            print(f"Error after {count} items: {e}", file=sys.stderr)
            sys.exit(1)
        finally:
            items.close()

    logger.info(f"Fetched {count} items from {args.path}")


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="saaskit",
        description="Command-line access to paginated SaaS REST APIs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Register command
    register_parser = subparsers.add_parser("register", help="Define and save a product")
    register_parser.add_argument("--id", required=True, help="Product ID (e.g., 'zendesk')")
    register_parser.add_argument("--name", required=True, help="Human-readable name")
    register_parser.add_argument(
        "--category",
        required=True,
        choices=[c.value for c in ProductCategory],
        help="Product category",
    )
    register_parser.add_argument("--base-url", required=True, help="API base URL")
    register_parser.add_argument(
        "--auth",
        default=AuthMethod.BEARER.value,
        choices=[m.value for m in AuthMethod],
        help="How the token is sent (default: bearer)",
    )
    register_parser.set_defaults(func=cmd_register)

    # Set-url command
    set_url_parser = subparsers.add_parser(
        "set-url", help="Point a product at another base URL (sandbox, proxy, region)"
    )
    set_url_parser.add_argument("--id", required=True, help="Product ID (e.g., 'rippling')")
    target = set_url_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--base-url", help="New API base URL")
    target.add_argument("--reset", action="store_true", help="Go back to the default URL")
    set_url_parser.set_defaults(func=cmd_set_url)

    # List command
    list_parser = subparsers.add_parser("list", help="List known products")
    list_parser.set_defaults(func=cmd_list)

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Stream every item of a list endpoint")
    fetch_parser.add_argument("--id", required=True, help="Product ID (e.g., 'rippling')")
    fetch_parser.add_argument("--path", required=True, help="List endpoint path (e.g., '/workers')")
    fetch_parser.add_argument(
        "--param",
        action="append",
        help="Fixed query parameter as key=value (repeatable)",
    )
    fetch_parser.add_argument(
        "--limit", type=non_negative_int, help="Stop after this many items"
    )
    fetch_parser.add_argument("--token", help="Access token (or set PRODUCT_API_TOKEN env var)")
    fetch_parser.set_defaults(func=cmd_fetch)

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
