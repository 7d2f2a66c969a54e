"""
Command line over a YAML world snapshot or a running bridge mod.

Run with: python -m research_areas sweep world.yaml --dry-run
      or: python -m research_areas --bridge sweep --dry-run
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import Settings
from .engine import GateEngine
from .host.bridge import BridgeClient
from .host.memory import RecordingMessenger, load_world_snapshot
from .sweep.sweeper import failure_messages, partition_name, summary_messages

logger = logging.getLogger(__name__)


def _build_engine(args) -> GateEngine:
    settings = Settings.from_yaml(args.config)

    if args.bridge:
        if args.bridge_url:
            settings.bridge_url = args.bridge_url
        client = BridgeClient(settings.bridge_url, settings.bridge_timeout)
        if args.completed:
            logger.warning("--completed is ignored with --bridge, research comes from the game")
        logger.info(f"Using bridge at {settings.bridge_url}")
        return GateEngine(settings, client, client, client)

    world, research = load_world_snapshot(args.world)
    for def_name in args.completed or []:
        research.complete(def_name)
    return GateEngine(settings, research, world, RecordingMessenger())


def cmd_sweep(engine: GateEngine, args) -> int:
    if args.dry_run:
        engine.registry.build()
        engine.completion.refresh(0)
        found = 0
        for partition in engine.world.partitions():
            for violation in engine.sweeper.find_violations(partition):
                entity = violation.entity
                print(f"{partition_name(partition)}: would remove {entity.shape.value} "
                      f"'{entity.label}' ({violation.result.reason})")
                found += 1
        print(f"{found} violation(s)")
        return 0

    report = engine.on_session_load()
    if engine.pending_confirmation:
        if not args.yes:
            print("Validation needs confirmation, re-run with --yes")
            return 2
        report = engine.confirm_compatibility(True)

    if report is None or report.is_empty:
        print("Nothing removed")
    else:
        for text in summary_messages(report):
            print(text)
    if report is not None:
        for text in failure_messages(report):
            print(text)
    return 1 if report is not None and report.failures else 0


def cmd_classify(engine: GateEngine, args) -> int:
    engine.registry.build()
    engine.completion.refresh(0)
    for partition in engine.world.partitions():
        name = partition_name(partition)
        for entity in list(partition.all_areas()) + list(partition.all_zones()):
            category = engine.classifier.classify(entity, partition)
            result = engine.gate.may_create(entity, partition)
            verdict = "allowed" if result.allowed else f"denied ({result.reason})"
            print(f"{name}\t{entity.shape.value}\t{entity.label}\t{category}\t{verdict}")
    return 0


def cmd_unlocks(engine: GateEngine, args) -> int:
    for requirement in engine.registry.requirements():
        text = engine.describe_unlocks(requirement) or "Unlocks: nothing"
        print(f"{requirement.display_name}: {text}")
    for category in engine.registry.missing():
        print(f"{category}: no research found, not gated")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="research-areas", description="Research-gated areas and zones")
    parser.add_argument("--config", "-c", default="./config/settings.yaml",
                        help="Path to settings file")
    parser.add_argument("--log-level", default=None,
                        help="Override log level from settings")
    parser.add_argument("--bridge", action="store_true",
                        help="Talk to the running game through the bridge mod instead of a snapshot")
    parser.add_argument("--bridge-url", default=None,
                        help="Override bridge URL from settings")
    sub = parser.add_subparsers(dest="command", required=True)

    sweep = sub.add_parser("sweep", help="Remove areas and zones without their research")
    sweep.add_argument("world", nargs="?", help="World snapshot (YAML)")
    sweep.add_argument("--dry-run", action="store_true", help="List violators without removing")
    sweep.add_argument("--yes", "-y", action="store_true", help="Confirm the compatibility prompt")
    sweep.add_argument("--completed", nargs="*", help="Research def names to mark complete")
    sweep.set_defaults(func=cmd_sweep)

    classify = sub.add_parser("classify", help="Show each entity's category and gate decision")
    classify.add_argument("world", nargs="?", help="World snapshot (YAML)")
    classify.add_argument("--completed", nargs="*", help="Research def names to mark complete")
    classify.set_defaults(func=cmd_classify)

    unlocks = sub.add_parser("unlocks", help="Show what each research project unlocks")
    unlocks.add_argument("world", nargs="?", help="World snapshot (YAML)")
    unlocks.set_defaults(func=cmd_unlocks, completed=None)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.bridge and not args.world:
        parser.error("a world snapshot is required unless --bridge is given")

    level = args.log_level or Settings.from_yaml(args.config).log_level
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        force=True,
    )

    engine = _build_engine(args)
    try:
        return args.func(engine, args)
    finally:
        if isinstance(engine.research, BridgeClient):
            engine.research.close()


if __name__ == "__main__":
    sys.exit(main())
