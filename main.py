import argparse
import logging
import statistics

from dynastydip.config_loader import ConfigLoader
from dynastydip.name_loader import NameLoader
from dynastydip.paths import CONFIG_DIR, NAME_LISTS_DIR, SAVE_DIR
from dynastydip.persistence import JsonFileRepository
from dynastydip.simulation import DiplomacyCore
from dynastydip.treasury import GoldLedger

# Toggle this to True if you want to collect & print stats of kingdoms at the end of a run
STATS_ENABLED = True


def setup_logging(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Simulate relations with rival kingdoms day by day.")
    parser.add_argument("--days", type=int, default=365, help="number of days to simulate")
    parser.add_argument("--start-day", type=int, default=1, help="index of the first simulated day")
    parser.add_argument("--threat", type=float, default=1.0, help="enemy threat level fed to the survival roll")
    parser.add_argument("--discovery-bonus", type=float, default=0.0, help="kingdom discovery tech bonus")
    parser.add_argument("--marriage-bonus", type=float, default=0.0, help="marriage chance tech bonus")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible runs")
    parser.add_argument("--gold", type=float, default=0.0, help="starting gold in the treasury")
    parser.add_argument("--save-dir", default=str(SAVE_DIR), help="directory for the saved diplomacy state")
    parser.add_argument("--verbose", action="store_true", help="log debug messages")
    return parser.parse_args(argv)


def log_event(event, payload):
    kingdom = payload.get("kingdom")
    name = kingdom.name if kingdom is not None else "?"
    logging.info(f"[event] {event.value}: {name}")


def print_stats(core, treasury):
    kingdoms = core.kingdoms()
    active = [k for k in kingdoms if not k.destroyed]
    fallen = [k for k in kingdoms if k.destroyed]

    print("\n=== Diplomacy summary ===")
    print(f"Kingdoms ever known: {len(kingdoms)}  active: {len(active)}  fallen: {len(fallen)}")
    for kingdom in active:
        print(
            f"  {kingdom.name:<12} {kingdom.dynasty:<12} ruler {kingdom.ruler.name} ({kingdom.ruler.age:.1f})"
            f"  heirs {len(kingdom.heirs)}  relation {core.relation(kingdom.id):+.1f}"
        )
    for kingdom in fallen:
        print(f"  {kingdom.name:<12} fell on day {kingdom.destroyed_day}")

    if active:
        print(f"Mean ruler age: {statistics.mean(k.ruler.age for k in active):.1f}")
        print(f"Mean wealth:    {statistics.mean(k.wealth for k in active):.1f}")
    print(f"Treasury gold:  {treasury.gold:.1f}")


def run_main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = ConfigLoader(CONFIG_DIR).get_config()
    except ValueError as e:
        logging.error(f"Failed to load configuration: {e}")
        return None

    treasury = GoldLedger(args.gold)
    core = DiplomacyCore(
        config=config,
        repository=JsonFileRepository(args.save_dir),
        treasury=treasury,
        name_loader=NameLoader(NAME_LISTS_DIR),
        seed=args.seed,
    )
    core.events.subscribe(None, log_event)
    core.init(current_day=args.start_day)

    bonuses = {"kingdom_discovery": args.discovery_bonus, "marriage_chance": args.marriage_bonus}
    failed_saves = 0
    for day in range(args.start_day, args.start_day + args.days):
        if not core.process_daily(day, threat_level=args.threat, bonuses=bonuses):
            failed_saves += 1

    if failed_saves:
        logging.warning(f"{failed_saves} daily saves failed.")

    if STATS_ENABLED:
        print_stats(core, treasury)
    return core


if __name__ == "__main__":
    run_main()
