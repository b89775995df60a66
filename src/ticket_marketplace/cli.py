"""Command-line front end for the ticket marketplace.

Examples:
  # Create an account and activate it
  ticket-marketplace register student@msu.edu
  ticket-marketplace verify-email student@msu.edu 123456

  # Log in (the token is kept in ~/.ticket_marketplace/session.json)
  ticket-marketplace login student@msu.edu

  # Browse and buy
  ticket-marketplace games
  ticket-marketplace tickets
  ticket-marketplace reserve <ticket-id>

  # Sell
  ticket-marketplace sell <game-id> --section GEN --row 128 --seat 28 --price 150.00
  ticket-marketplace my-listings --status verified
  ticket-marketplace dashboard
"""

import argparse
import getpass
import logging
import os
import sys
from typing import Any

from .analysis.listing_stats import fetch_listing_stats
from .api.client import ApiError, TicketMarketplaceAPI
from .exceptions import ValidationError
from .models.game import Game
from .models.ticket import Ticket
from .utils.data_helpers import format_datetime, format_price
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

LEVEL_CHOICES = ["STUD", "GA", "RES"]


def _password(args: argparse.Namespace) -> str:
    return args.password or getpass.getpass("Password: ")


def _admin_key(args: argparse.Namespace) -> str:
    key = args.admin_key or os.getenv("ADMIN_API_KEY")
    if not key:
        raise ValidationError("Admin key required (--admin-key or ADMIN_API_KEY)")
    return key


def _print_tickets(tickets: list[dict[str, Any]]) -> None:
    if not tickets:
        print("No tickets found.")
        return
    for ticket_data in tickets:
        ticket = Ticket.from_api_data(ticket_data)
        marker = "*" if ticket.is_purchasable() else " "
        print(f"{marker} {ticket.id}  {ticket}")
        print(f"    {format_datetime(ticket.event_date)}")


def cmd_register(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    password = _password(args)
    response = api.register(args.email, password)
    print(response.get("message", "Registered."))
    if response.get("verification_code"):
        print(f"Verification code: {response['verification_code']}")
    return 0


def cmd_verify_email(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    response = api.verify_email(args.email, args.code)
    print(response.get("message", "Email verified."))
    return 0


def cmd_login(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    response = api.login(args.email, _password(args))
    print(f"Logged in as {response['user']['email']}")
    return 0


def cmd_logout(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    api.logout()
    print("Logged out.")
    return 0


def cmd_games(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    games = api.get_games().get("games", [])
    if not games:
        print("No upcoming games.")
        return 0
    for game_data in games:
        game = Game.from_api_data(game_data)
        print(f"{game.id}  {game.name} [{game.sport_type.value}]")
        print(f"    {format_datetime(game.game_time)} (trading closes {format_datetime(game.cutoff_time)})")
    return 0


def cmd_tickets(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    _print_tickets(api.get_tickets().get("tickets", []))
    return 0


def cmd_my_listings(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    _print_tickets(api.get_my_listings(args.status).get("tickets", []))
    return 0


def cmd_sell(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    ticket = api.create_ticket(
        game_id=args.game_id,
        level=args.level,
        seat_section=args.section,
        seat_row=args.row,
        seat_number=args.seat,
        price=args.price,
    )
    print(f"Ticket listed: {ticket['id']} at {format_price(ticket['price'])}")
    print(f"Transfer the ticket to the custodial account before {format_datetime(ticket['transfer_deadline'])}.")
    return 0


def cmd_claim(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    ticket = api.claim_ticket(args.ticket_id)
    print(f"Ticket {ticket['id']} is now {ticket['status']}")
    return 0


def cmd_reserve(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    try:
        reservation = api.reserve_ticket(args.ticket_id)
    except ApiError as e:
        print(f"Ticket is not available for reservation: {e.message}", file=sys.stderr)
        return 1
    print(
        f"Reserved {reservation['ticket_id']} at {format_price(reservation['price_at_reservation'])}"
    )
    print("Payment is not available yet; the seller will be in touch.")
    return 0


def cmd_dashboard(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    stats = fetch_listing_stats(api)
    print(f"Total listings: {stats.total}")
    print(f"  Unverified:   {stats.unverified}")
    print(f"  Verified:     {stats.verified}")
    print(f"  Sold:         {stats.sold}")
    return 0


def cmd_create_game(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    game = api.create_game(args.sport_type, args.name, args.game_time, _admin_key(args))
    print(f"Game created: {game['id']} {game['name']}")
    return 0


def cmd_delete_game(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    api.delete_game(args.game_id, _admin_key(args))
    print(f"Game deleted: {args.game_id}")
    return 0


def cmd_set_status(api: TicketMarketplaceAPI, args: argparse.Namespace) -> int:
    ticket = api.update_ticket_status(args.ticket_id, args.status, _admin_key(args))
    print(f"Ticket {ticket['id']} is now {ticket['status']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ticket-marketplace",
        description="Buy and sell student game tickets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--api-url", help="API base URL (default: TICKET_API_URL)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("register", help="Create an account")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_register)

    p = subparsers.add_parser("verify-email", help="Activate an account")
    p.add_argument("email")
    p.add_argument("code")
    p.set_defaults(func=cmd_verify_email)

    p = subparsers.add_parser("login", help="Log in and remember the session")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_login)

    p = subparsers.add_parser("logout", help="Forget the stored session")
    p.set_defaults(func=cmd_logout)

    p = subparsers.add_parser("games", help="List games open for trading")
    p.set_defaults(func=cmd_games)

    p = subparsers.add_parser("tickets", help="Browse tickets for sale (* = can be reserved)")
    p.set_defaults(func=cmd_tickets)

    p = subparsers.add_parser("my-listings", help="List your tickets")
    p.add_argument("--status", help="Only show tickets with this status")
    p.set_defaults(func=cmd_my_listings)

    p = subparsers.add_parser("sell", help="List a ticket for sale")
    p.add_argument("game_id")
    p.add_argument("--level", choices=LEVEL_CHOICES, default="STUD")
    p.add_argument("--section", required=True)
    p.add_argument("--row", required=True)
    p.add_argument("--seat", required=True)
    p.add_argument("--price", required=True, help="Price in dollars, e.g. 150.00")
    p.set_defaults(func=cmd_sell)

    p = subparsers.add_parser("claim", help="Report that you transferred a ticket for verification")
    p.add_argument("ticket_id")
    p.set_defaults(func=cmd_claim)

    p = subparsers.add_parser("reserve", help="Reserve a verified ticket")
    p.add_argument("ticket_id")
    p.set_defaults(func=cmd_reserve)

    p = subparsers.add_parser("dashboard", help="Show listing counts")
    p.set_defaults(func=cmd_dashboard)

    p = subparsers.add_parser("create-game", help="Create a game (admin)")
    p.add_argument("sport_type", choices=["football", "basketball", "hockey"])
    p.add_argument("name")
    p.add_argument("game_time", help="ISO 8601 start time with offset, e.g. 2026-11-01T19:00:00Z")
    p.add_argument("--admin-key")
    p.set_defaults(func=cmd_create_game)

    p = subparsers.add_parser("delete-game", help="Delete a game without listings (admin)")
    p.add_argument("game_id")
    p.add_argument("--admin-key")
    p.set_defaults(func=cmd_delete_game)

    p = subparsers.add_parser("set-status", help="Move a ticket to a new status (admin)")
    p.add_argument("ticket_id")
    p.add_argument("status", help="e.g. verified, paid, sold, cancelled")
    p.add_argument("--admin-key")
    p.set_defaults(func=cmd_set_status)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the marketplace CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING")

    with TicketMarketplaceAPI(base_url=args.api_url) as api:
        try:
            return args.func(api, args)
        except ValidationError as e:
            print(f"Invalid input: {e.message}", file=sys.stderr)
            return 2
        except ApiError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
