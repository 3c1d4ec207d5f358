"""
Wildcard CLI - Command-line interface for the session engine.

Usage:
    wildcard serve [--host HOST] [--port PORT]    Run the REST API
    wildcard demo [--players N] [--seed S]        Play a scripted game
"""

import argparse
import asyncio
import sys

from . import config

DEMO_MAX_TURNS = 500
DEMO_WILD_COLOR = "red"


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Wildcard - Shedding card game session engine",
        prog="wildcard",
    )
    parser.add_argument("--log-level", default=None, help="Override WILDCARD_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Play a scripted game in memory")
    demo_parser.add_argument("--players", type=int, default=3, help="Number of seats (2-10)")
    demo_parser.add_argument("--seed", type=int, default=None, help="Deck shuffle seed")
    demo_parser.add_argument("--hand-size", type=int, default=config.HAND_SIZE, help="Cards dealt per seat")

    args = parser.parse_args(argv)
    config.configure_logging(args.log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "demo":
        sys.exit(asyncio.run(cmd_demo(args)))
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API."""
    import uvicorn

    uvicorn.run(
        "wildcard.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=(args.log_level or config.WILDCARD_LOG_LEVEL).lower(),
    )


async def cmd_demo(args) -> int:
    """Seat N players, start, and let each play their first card until someone wins."""
    from .session import SessionManager

    if not 2 <= args.players <= 10:
        print("Error: --players must be between 2 and 10")
        return 1

    manager = SessionManager(hand_size=args.hand_size, deck_seed=args.seed)
    players = [f"player{i}" for i in range(1, args.players + 1)]

    created = await manager.create_session(
        players[0], title="Demo", min_players=2, max_players=args.players,
    )
    if created.is_failure:
        print(f"Error: {created.error}")
        return 1
    session_id = created.value.session_id
    print(f"Session created: {session_id}")

    for player_id in players[1:]:
        (await manager.join_session(player_id, session_id)).get_or_throw()
        (await manager.set_ready(player_id, session_id)).get_or_throw()

    started = (await manager.start_session(players[0], session_id)).get_or_throw()
    print(f"Started with {started.num_players} players, {args.hand_size} cards each")
    if started.initial_card:
        print(f"Initial card: {started.initial_card.card_id}")

    for turn in range(1, DEMO_MAX_TURNS + 1):
        current = (await manager.get_current_player(session_id)).get_or_throw()
        hand = (await manager.get_hand(session_id, current)).get_or_throw()
        card = hand[0]
        color = DEMO_WILD_COLOR if card.is_wild else None

        receipt = (await manager.play_card(session_id, current, card.card_id, color)).get_or_throw()
        line = f"[{turn:3d}] {current} played {card.card_id}"
        if receipt.changes:
            line += f" ({'; '.join(receipt.changes)})"
        print(line)

        if receipt.game_over:
            print(f"\n{receipt.winner_id} wins after {turn} turns")
            return 0

        await manager.advance_turn(session_id)

    print(f"\nNo winner after {DEMO_MAX_TURNS} turns")
    return 0


if __name__ == "__main__":
    main()
