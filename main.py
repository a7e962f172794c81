"""Simple CLI entry point for the Slam Sports storefront."""

import logging
from typing import Dict, Optional, Set, Tuple

from storefront_xray import (
    FilterCriteria,
    FilterEngine,
    GeneratedCatalog,
    InvalidCriteriaError,
    StorefrontSession,
    TraceSink,
    facet_values,
)
from storefront_xray.config import MAX_RESULTS_SHOWN

HELP = (
    "Commands: search <text> | sport <name> | brand <name> | category <name> | rating <n>\n"
    "          apply | reset | show | stats | help | exit\n"
    "sport/brand/category/rating toggle a selection; nothing changes until 'apply'."
)

TOGGLES = {"sport": "sports", "brand": "brands", "category": "categories", "rating": "ratings"}


def parse_command(line: str) -> Tuple[str, str]:
    """Split 'brand Apex Sports' into ('brand', 'Apex Sports')."""
    command, _, arg = line.strip().partition(" ")
    return command.lower(), arg.strip()


def toggle(selected: Set, value) -> None:
    if value in selected:
        selected.discard(value)
    else:
        selected.add(value)


def pending_criteria(search: str, pending: Dict[str, Set]) -> FilterCriteria:
    return FilterCriteria(search=search, **pending)


def print_results(session: StorefrontSession) -> None:
    results = session.results
    print(f"{len(results)} products ({session.active_criteria.describe() or 'no filters'})")
    for r in results[:MAX_RESULTS_SHOWN]:
        p = r.product
        print(f"  #{r.rank:<3} {p.name} | {p.brand} | ${p.price:g} | {p.rating}* | score {r.score:g}")
    if len(results) > MAX_RESULTS_SHOWN:
        print(f"  ... {len(results) - MAX_RESULTS_SHOWN} more")


def print_stats(session: StorefrontSession) -> None:
    stats = session.sink.stats()
    print(f"X-Ray: {stats['total_entries']} entries {stats['counts_by_kind']}")
    trace = session.last_trace
    if trace is not None:
        s = trace.summary
        print(
            f"Last execution {trace.execution_id}: {s.passed_count}/{s.total_products} passed, "
            f"{s.total_checks} checks, avg score {s.average_score:.2f}, top {s.top_score:.2f}, "
            f"{s.duration_ms:.2f}ms"
        )


def main(seed: Optional[int] = None) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    catalog = GeneratedCatalog(seed=seed)
    session = StorefrontSession(FilterEngine(catalog, TraceSink()))
    facets = facet_values(catalog.get_catalog())

    search = ""
    pending: Dict[str, Set] = {field: set() for field in TOGGLES.values()}

    print("Slam Sports storefront is ready. Type 'help' for commands, 'exit' or 'quit' to stop.")
    for name, options in facets.items():
        print(f"  {name}: {', '.join(str(o) for o in options)}")

    while True:
        try:
            user_input = input("> ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting.")
            break

        if not user_input:
            continue
        command, arg = parse_command(user_input)
        if command in {"exit", "quit"}:
            print("Goodbye.")
            break

        if command == "help":
            print(HELP)
        elif command == "search":
            search = arg
        elif command in TOGGLES:
            if command == "rating":
                if not arg.isdigit():
                    print("Rating must be a number.")
                    continue
                toggle(pending["ratings"], int(arg))
            else:
                toggle(pending[TOGGLES[command]], arg)
        elif command == "apply":
            try:
                session.apply(pending_criteria(search, pending))
            except InvalidCriteriaError as e:
                print(f"Error: {e}")
                continue
            print_results(session)
        elif command == "reset":
            search = ""
            pending = {field: set() for field in TOGGLES.values()}
            session.reset()
            print_results(session)
        elif command == "show":
            print_results(session)
        elif command == "stats":
            print_stats(session)
        else:
            print(f"Unknown command '{command}'. Type 'help'.")

    print("Session ended.")


if __name__ == "__main__":
    main()
