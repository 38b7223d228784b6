"""
Fatebound CLI - Command-line interface for the engine.

Usage:
    fatebound champions                     List champions
    fatebound cards                         List cards
    fatebound validate-deck <id> [<id>...]  Check a deck
    fatebound simulate                      Bot vs bot battle
    fatebound serve                         Run the HTTP API
"""

import argparse
import random
import sys

from loguru import logger

from .config import configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Fatebound - Card Battle Engine",
        prog="fatebound",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default from FATEBOUND_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("champions", help="List champions")
    subparsers.add_parser("cards", help="List cards")

    validate_parser = subparsers.add_parser("validate-deck", help="Check a deck")
    validate_parser.add_argument("card_ids", nargs="*", help="Card ids")

    simulate_parser = subparsers.add_parser("simulate", help="Bot vs bot battle")
    simulate_parser.add_argument("--champion", default="c1", help="Player-side champion id")
    simulate_parser.add_argument("--opponent", default=None, help="Opponent champion id")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--personality", default="balanced", help="Player-side bot personality")
    simulate_parser.add_argument(
        "--opponent-personality", default="balanced", help="Opponent bot personality"
    )
    simulate_parser.add_argument("--max-turns", type=int, default=60, help="Stop after this many turns")
    simulate_parser.add_argument("--quiet", action="store_true", help="Only print the result")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "champions":
        return cmd_champions(args)
    elif args.command == "cards":
        return cmd_cards(args)
    elif args.command == "validate-deck":
        return cmd_validate_deck(args)
    elif args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_champions(args):
    """List champions."""
    from .catalog import CHAMPIONS

    for champion in CHAMPIONS:
        ability = champion.ability
        print(f"{champion.id:4} {champion.name} - {champion.title} [{champion.realm.value}]")
        print(f"     HP {champion.max_health}, {ability.name} ({ability.cost} mana): {ability.description}")


def cmd_cards(args):
    """List cards."""
    from .catalog import CARDS

    for card in CARDS:
        print(f"{card.id:4} {card.name:24} {card.cost} mana  {card.card_type.value:8} {card.description}")


def cmd_validate_deck(args):
    """Check a deck."""
    from .catalog import validate_deck

    errors = validate_deck(args.card_ids)
    if errors:
        print("Deck is invalid:")
        for e in errors:
            print(f"  - {e}")
        sys.exit(1)
    print("Deck is valid")


def cmd_simulate(args):
    """Run a battle between two bots and print the log."""
    from .bots import OpponentBot, get_personality
    from .catalog import CatalogError, generate_opponent_deck, get_champion_by_id
    from .engine_core import Reducer, Side, create_battle

    champion = get_champion_by_id(args.champion)
    opponent = get_champion_by_id(args.opponent) if args.opponent else None
    if champion is None or (args.opponent and opponent is None):
        print(f"Error: Unknown champion: {args.opponent if champion else args.champion}")
        sys.exit(1)

    rng = random.Random(args.seed)
    try:
        state = create_battle(
            champion,
            generate_opponent_deck(champion, rng),
            opponent_champion=opponent,
            random_seed=args.seed,
        )
        bots = {
            Side.PLAYER: OpponentBot(
                side=Side.PLAYER, personality=get_personality(args.personality), rng=rng
            ),
            Side.OPPONENT: OpponentBot(
                side=Side.OPPONENT, personality=get_personality(args.opponent_personality), rng=rng
            ),
        }
    except (CatalogError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    reducer = Reducer()
    logged = 0
    while not state.is_over and state.turn_number <= args.max_turns:
        turn = bots[state.active_side].run_turn(state, reducer)
        if turn.state is state:
            logger.warning("Bot made no progress, stopping")
            break
        state = turn.state
        if not args.quiet:
            for line in state.battle_log[logged:]:
                print(line)
        logged = len(state.battle_log)

    print()
    print(f"{state.player.champion.name}: {state.player.health}/{state.player.max_health}")
    print(f"{state.opponent.champion.name}: {state.opponent.health}/{state.opponent.max_health}")
    if state.winner is None:
        print(f"No winner after {args.max_turns} turns")
    else:
        winner = state.combatant(state.winner).champion.name
        print(f"Winner: {winner} ({state.winner.value}) on turn {state.turn_number}")


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "fatebound.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
