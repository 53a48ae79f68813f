# Command-line entry point for the court rotation engine

import argparse
import logging
import sys

import storage


def print_state(engine):
    for court in engine.courts:
        status = " (disabled)" if engine.is_disabled(court.id) else ""
        players = ", ".join(court.group) if court.group else "empty"
        print(f"{court.name}{status}: {players}")
    if engine.queue:
        print("\n--- Queue ---")
        for i, group in enumerate(engine.queue, start=1):
            print(f"  {i}. {', '.join(group)}")
    print(f"\nWaiting: {', '.join(engine.waiting) or '-'}")
    if engine.priority:
        print(f"Priority: {', '.join(engine.priority)}")
    if engine.rest_once:
        print(f"Resting next round: {', '.join(engine.rest_once)}")
    stats = engine.stats()
    print(f"Total {stats['total']} | waiting {stats['waiting']} | "
          f"on courts {stats['on_courts']} | queued {stats['queued']}")


def build_parser():
    parser = argparse.ArgumentParser(description="Rotate players through 4-player courts")
    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('status', help="Show courts, queue and waiting players")
    register = sub.add_parser('register', help="Register players from a file (one name per line)")
    register.add_argument('file', help="Names file, or '-' for stdin")
    register.add_argument('--add', action='store_true', help="Only add names not already present")
    courts = sub.add_parser('courts', help="Set the number of courts")
    courts.add_argument('count', type=int)
    sub.add_parser('run', help="Form new groups and seat them")
    finish = sub.add_parser('finish', help="Finish the match on a court")
    finish.add_argument('court_id', type=int)
    rename = sub.add_parser('rename', help="Rename a court")
    rename.add_argument('court_id', type=int)
    rename.add_argument('name')
    rest = sub.add_parser('rest', help="Toggle a player's one-round rest")
    rest.add_argument('name')
    remove = sub.add_parser('remove', help="Remove a player from the waiting list")
    remove.add_argument('name')
    reset = sub.add_parser('reset', help="Clear all rotation data")
    reset.add_argument('--yes', action='store_true', help="Confirm the reset")
    return parser


def run_command(engine, args):
    if args.command == 'register':
        if args.file == '-':
            text = sys.stdin.read()
        else:
            with open(args.file, mode='r', encoding='utf-8') as file:
                text = file.read()
        engine.last_input = text
        return engine.register_players(storage.parse_names(text), 'add-new-only' if args.add else 'replace')
    if args.command == 'courts':
        return engine.set_court_count(args.count)
    if args.command == 'run':
        if not engine.can_form:
            print(f"Not enough players to form a group ({engine.eligible_count} eligible).")
        return engine.run_formation()
    if args.command == 'finish':
        return engine.finish_court(args.court_id)
    if args.command == 'rename':
        return engine.rename_court(args.court_id, args.name)
    if args.command == 'rest':
        return engine.toggle_rest_once(args.name)
    if args.command == 'remove':
        return engine.remove_player(args.name)
    return True


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    args = build_parser().parse_args(argv)

    if args.command == 'reset':
        if not args.yes:
            print("Refusing to reset without --yes.", file=sys.stderr)
            return 1
        with storage.data_lock():
            storage.clear_state()
        print("All rotation data cleared.")
        return 0

    with storage.data_lock():
        engine = storage.load_engine()
        if args.command != 'status':
            if not run_command(engine, args):
                print("Nothing changed.")
            storage.save_engine(engine)

    print_state(engine)
    return 0


if __name__ == '__main__':
    sys.exit(main())
