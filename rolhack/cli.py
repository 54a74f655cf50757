"""
RolHack CLI - Command-line interface for the engine.

Usage:
    rolhack validate <world_file>                      Validate a world definition
    rolhack init <world_file> <state_file>             Start a run
    rolhack hack <world_file> <state_file> <roll>      Hack the current node
    rolhack discover <world_file> <state_file>         Scan for hidden accesses
    rolhack move <world_file> <state_file> <node>      Move to a linked node
    rolhack switch <world_file> <state_file> <circuit> Switch circuit
    rolhack moves <world_file> <state_file>            List reachable nodes
    rolhack audit <world_file> <state_file>            Print the run audit
    rolhack timeline <state_file>                      Print the run timeline
    rolhack tutorial [--output FILE]                   Write the tutorial world

Worlds and runs are JSON documents. A state file is rewritten only when the
command actually changed the run.
"""

import argparse
import json
import logging
import sys

from .config import ROLHACK_EXPORT_FORMAT, configure_logging

log = logging.getLogger(__name__)

EXPORT_FORMATS = ["text", "markdown", "json"]


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="RolHack - Network intrusion rules engine",
        prog="rolhack",
    )
    parser.add_argument("--log-level", help="Logging level (default from ROLHACK_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a world definition")
    validate_parser.add_argument("world_file", help="Path to world JSON file")
    validate_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # Init command
    init_parser = subparsers.add_parser("init", help="Start a new run")
    init_parser.add_argument("world_file", help="Path to world JSON file")
    init_parser.add_argument("state_file", help="Path of the run state file to create")

    # Hack command
    hack_parser = subparsers.add_parser("hack", help="Hack the current node")
    _add_run_arguments(hack_parser)
    hack_parser.add_argument("roll", type=int, help="Breach roll")
    hack_parser.add_argument("--fail-die", type=int, dest="fail_die_roll", help="Fail die roll")

    # Discover command
    discover_parser = subparsers.add_parser("discover", help="Scan for hidden accesses")
    _add_run_arguments(discover_parser)

    # Move command
    move_parser = subparsers.add_parser("move", help="Move to a linked node")
    _add_run_arguments(move_parser)
    move_parser.add_argument("node_id", help="Target node id")

    # Switch command
    switch_parser = subparsers.add_parser("switch", help="Switch to another circuit")
    _add_run_arguments(switch_parser)
    switch_parser.add_argument("circuit_id", help="Target circuit id")

    # Moves command
    moves_parser = subparsers.add_parser("moves", help="List reachable nodes")
    _add_run_arguments(moves_parser)

    # Audit command
    audit_parser = subparsers.add_parser("audit", help="Print the run audit")
    _add_run_arguments(audit_parser)
    audit_parser.add_argument("--format", choices=EXPORT_FORMATS, default=ROLHACK_EXPORT_FORMAT)
    audit_parser.add_argument("--name", help="Run name")
    audit_parser.add_argument("--project", default="", help="Project name")

    # Timeline command
    timeline_parser = subparsers.add_parser("timeline", help="Print the run timeline")
    timeline_parser.add_argument("state_file", help="Path to run state JSON file")
    timeline_parser.add_argument("--format", choices=EXPORT_FORMATS, default=ROLHACK_EXPORT_FORMAT)
    timeline_parser.add_argument("--project", help="Project name")
    timeline_parser.add_argument("--at", type=int, help="Show the run as of this event index")

    # Tutorial command
    tutorial_parser = subparsers.add_parser("tutorial", help="Write the tutorial world")
    tutorial_parser.add_argument("--output", "-o", help="Output world file (default: stdout)")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    commands = {
        "validate": cmd_validate,
        "init": cmd_init,
        "hack": cmd_hack,
        "discover": cmd_discover,
        "move": cmd_move,
        "switch": cmd_switch,
        "moves": cmd_moves,
        "audit": cmd_audit,
        "timeline": cmd_timeline,
        "tutorial": cmd_tutorial,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)
    command(args)


def _add_run_arguments(parser):
    parser.add_argument("world_file", help="Path to world JSON file")
    parser.add_argument("state_file", help="Path to run state JSON file")


def cmd_validate(args):
    """Validate a world definition."""
    from .world_schema import validate_world_json, format_error_path

    result = validate_world_json(_read_text(args.world_file))

    if args.json:
        print(json.dumps({
            "valid": result.valid,
            "errors": [e.to_dict() for e in result.errors],
            "warnings": [w.to_dict() for w in result.warnings],
        }, indent=2))
    else:
        print(f"Validating: {args.world_file}")
        print("Valid" if result.valid else "Invalid")
        if result.errors:
            print("\nErrors:")
            for e in result.errors:
                print(f"  - [{e.code}] {format_error_path(e.path)}: {e.message}")
        if result.warnings:
            print("\nWarnings:")
            for w in result.warnings:
                print(f"  - [{w.code}] {format_error_path(w.path)}: {w.message}")

    if not result.valid:
        sys.exit(1)


def cmd_init(args):
    """Start a new run."""
    from .engine_core import initialize, NoEntryNodeError

    world = _load_world(args.world_file)
    try:
        state = initialize(world)
    except NoEntryNodeError as e:
        print(f"Error: {e}")
        sys.exit(1)

    _save_state(args.state_file, state)
    print(f"Run started at {state.position.node_id} in {state.position.circuit_id}")
    print(f"State written to: {args.state_file}")


def cmd_hack(args):
    """Hack the current node."""
    from .engine_core import Action

    outcome = _run_action(args, Action.hack(args.roll, args.fail_die_roll))
    if outcome.needs_second_roll:
        print(f"Roll a D{outcome.fail_die} and repeat with --fail-die.")
    if outcome.warning:
        print(f"[{outcome.warning.severity.value}] {outcome.warning.node_id}")
    if outcome.game_over:
        print("GAME OVER")
    if outcome.run_completed:
        print("RUN COMPLETE")


def cmd_discover(args):
    """Scan for hidden accesses."""
    from .engine_core import Action

    outcome = _run_action(args, Action.discover())
    for node_id in outcome.discovered_nodes:
        print(f"  + {node_id}")


def cmd_move(args):
    """Move to a linked node."""
    from .engine_core import Action

    _run_action(args, Action.move(args.node_id))


def cmd_switch(args):
    """Switch to another circuit."""
    from .engine_core import Action

    _run_action(args, Action.switch_circuit(args.circuit_id))


def cmd_moves(args):
    """List reachable nodes from the current position."""
    from .engine_core import available_moves
    from .engine_core.graph import current_node_info, has_hidden_links_available

    world = _load_world(args.world_file)
    state = _load_state(args.state_file)

    info = current_node_info(state, world)
    if info:
        status = "hacked" if info.node_state.hacked else "not hacked"
        print(f"At: {info.node.name} ({info.node.id}) in {info.circuit.name}, {status}")
    moves = available_moves(state, world)
    print(f"Retreat: {', '.join(moves.retreat) or '-'}")
    print(f"Advance: {', '.join(moves.advance) or '-'}")
    if has_hidden_links_available(state, world):
        print("Scanner reports unexplored signals.")


def cmd_audit(args):
    """Print the run audit."""
    from .audit import generate_audit_data, export_audit_summary

    world = _load_world(args.world_file)
    state = _load_state(args.state_file)
    audit = generate_audit_data(
        state,
        world,
        run_name=args.name,
        project_name=args.project,
    )
    print(export_audit_summary(audit, args.format), end="")


def cmd_timeline(args):
    """Print the run timeline."""
    from .audit import export_timeline, state_at

    state = _load_state(args.state_file)
    if args.at is not None:
        try:
            state = state_at(state, args.at)
        except IndexError as e:
            print(f"Error: {e}")
            sys.exit(1)
    print(export_timeline(state.timeline, args.format, args.project), end="")


def cmd_tutorial(args):
    """Write the tutorial world."""
    from .samples import create_tutorial_world

    text = json.dumps(create_tutorial_world().to_document(), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"Tutorial world written to: {args.output}")
    else:
        print(text)


def _run_action(args, action):
    """Load the run, apply an action, persist if changed, print the outcome."""
    from .engine_core import Reducer

    world = _load_world(args.world_file)
    state = _load_state(args.state_file)

    result = Reducer(world).apply(state, action)
    if result.outcome is None:
        print(f"Error: {result.error}")
        sys.exit(1)

    print(result.outcome.message)
    if result.changed:
        _save_state(args.state_file, result.new_state)
    if not result.success:
        log.debug("Action %s rejected: %s", action.action_type.value, result.error_code)
        print(f"Rejected: {result.error_code}")
        sys.exit(1)
    return result.outcome


def _read_text(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)


def _load_world(path):
    from .world_schema import validate_world_json, format_error_path

    result = validate_world_json(_read_text(path))
    if not result.valid:
        print(f"Error: Invalid world definition: {path}")
        for e in result.errors:
            print(f"  - [{e.code}] {format_error_path(e.path)}: {e.message}")
        sys.exit(1)
    return result.world


def _load_state(path):
    from .engine_core import parse_run_state_json, RunStateValidationError

    try:
        return parse_run_state_json(_read_text(path))
    except RunStateValidationError as e:
        print(f"Error: {e}")
        for error in e.errors:
            print(f"  - [{error['code']}] {error['path']}: {error['message']}")
        sys.exit(1)


def _save_state(path, state):
    from .engine_core import dump_run_state_json

    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_run_state_json(state, indent=2) + "\n")


if __name__ == "__main__":
    main()
