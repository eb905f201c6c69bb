"""CLI: command-line interface for studybuddy."""

import argparse
import asyncio
import sys

from studybuddy.app import App
from studybuddy.encoder import ambiguous_cards, encode_deck
from studybuddy.errors import SessionBusy
from studybuddy.models import CATEGORIES, get_category
from studybuddy.study import StudyQueue


def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def cmd_categories(args, app: App):
    counts = app.store.count_by_category()
    for cat in CATEGORIES:
        print(f"{cat.id}  [{cat.short}] {cat.name}: {counts[cat.id]} terms")


def cmd_list(args, app: App):
    if args.cat is not None:
        get_category(args.cat)
        cards = app.store.cards_in_category(args.cat)
    else:
        cards = app.store.list_cards()
    if not cards:
        print("No terms yet. Add one with 'studybuddy add'.")
        return
    for card in cards:
        short = get_category(card.category_index).short
        print(f"{card.id}  [{short}] {card.question} -> {card.answer}")


def cmd_add(args, app: App):
    card = app.store.add_card(args.cat, args.question, args.answer)
    print(f"Added card {card.id} to {get_category(args.cat).name}")


def cmd_remove(args, app: App):
    if not args.yes and not _confirm("Delete this card?"):
        return
    if app.store.remove_card(args.id):
        print(f"Deleted card {args.id}")
    else:
        print(f"No card with id {args.id}", file=sys.stderr)
        sys.exit(1)


def cmd_clear(args, app: App):
    cat = get_category(args.cat)
    count = len(app.store.cards_in_category(cat.id))
    if count == 0:
        print(f"No cards in \"{cat.name}\".")
        return
    msg = f"This will delete all {count} cards in \"{cat.name}\". This cannot be undone."
    if not args.yes and not _confirm(msg):
        return
    app.store.clear_category(cat.id)
    print("Deck cleared")


def cmd_study(args, app: App):
    get_category(args.cat)
    queue = StudyQueue(app.store.cards_in_category(args.cat))
    if args.shuffle:
        queue.shuffle()
        print("Deck Shuffled!")
    print("Keys: Enter=flip  n=next  p=prev  s=shuffle  q=quit")
    while True:
        side = queue.current.answer if queue.flipped else queue.current.question
        print(f"\n({queue.progress}) {'A' if queue.flipped else 'Q'}: {side}")
        try:
            key = input("> ").strip().lower()
        except EOFError:
            break
        if key == "q":
            break
        elif key == "":
            queue.flip()
        elif key == "n":
            if not queue.next() and _confirm("End of deck. Restart?"):
                queue.restart()
        elif key == "p":
            queue.prev()
        elif key == "s":
            queue.shuffle()
            print("Deck Shuffled!")


def cmd_sync(args, app: App):
    config = app.sync_config()
    cards = app.store.list_cards()

    for card in ambiguous_cards(cards):
        print(f"Warning: card {card.id} contains '|' and will arrive garbled on the device",
              file=sys.stderr)

    if args.dry_run:
        for command in encode_deck(cards, config.include_category):
            print(command)
        return

    result = asyncio.run(app.sync(publish=print))
    if not result.ok:
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(prog="studybuddy",
                                     description="Study cards with a StudyBuddy reviewer")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("categories", help="Show categories and card counts")

    p_list = subparsers.add_parser("list", help="List cards")
    p_list.add_argument("--cat", type=int, help="Only cards in this category")

    p_add = subparsers.add_parser("add", help="Add a card")
    p_add.add_argument("cat", type=int, help="Category number (see 'categories')")
    p_add.add_argument("question")
    p_add.add_argument("answer")

    p_remove = subparsers.add_parser("remove", help="Delete a card by id")
    p_remove.add_argument("id", type=int)
    p_remove.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    p_clear = subparsers.add_parser("clear", help="Delete every card in a category")
    p_clear.add_argument("cat", type=int)
    p_clear.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    p_study = subparsers.add_parser("study", help="Study a category in the terminal")
    p_study.add_argument("cat", type=int)
    p_study.add_argument("--shuffle", action="store_true", help="Shuffle before starting")

    p_sync = subparsers.add_parser("sync", help="Copy the whole deck to the reviewer device")
    p_sync.add_argument("--dry-run", action="store_true",
                        help="Print the commands that would be sent")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    app = App()
    if not app.data_dir.exists():
        app.data_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created data directory: {app.data_dir}")

    commands = {
        "categories": cmd_categories,
        "list": cmd_list,
        "add": cmd_add,
        "remove": cmd_remove,
        "clear": cmd_clear,
        "study": cmd_study,
        "sync": cmd_sync,
    }
    try:
        app.init_db()
        commands[args.command](args, app)
    except (ValueError, SessionBusy) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        app.close()
