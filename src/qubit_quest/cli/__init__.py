"""
Command-line interface for qubit-quest.

Usage:
    qubit-quest puzzles
    qubit-quest simulate --qubits 2 --gate H:0 --gate CNOT:0:1
    qubit-quest solve puzzle-4-bell-state --gate H:0 --gate CNOT:0:1
    qubit-quest serve --port 8888
"""
import argparse
import sys
from typing import List, Optional

from ..config import EngineConfig
from ..core import Circuit, Gate, GateType
from ..errors import QubitQuestError
from ..logging_config import setup_logging


def parse_gate_spec(spec: str) -> Gate:
    """
    Parse ``TYPE:TARGET`` or ``CNOT:CONTROL:TARGET``.

    >>> parse_gate_spec('cnot:0:1')
    Gate(CNOT, control=0, target=1)
    """
    parts = spec.split(':')
    try:
        gate_type = GateType.parse(parts[0])
        qubits = [int(p) for p in parts[1:]]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid gate spec: {spec!r}")

    expected = gate_type.num_qubits
    if len(qubits) != expected:
        raise argparse.ArgumentTypeError(
            f"{gate_type.value} takes {expected} qubit index(es), got {spec!r}"
        )
    try:
        if gate_type is GateType.CNOT:
            return Gate.cnot(qubits[0], qubits[1])
        return Gate(gate_type, qubits[0])
    except QubitQuestError as e:
        raise argparse.ArgumentTypeError(str(e))


def _print_circuit(qc: Circuit) -> None:
    from ..visualization import draw_circuit, show_state

    print(draw_circuit(qc))
    print()
    print(show_state(qc.state))


def cmd_puzzles(args, config):
    """List the built-in puzzles."""
    from ..puzzles import CIRCUIT_PUZZLES

    for puzzle in CIRCUIT_PUZZLES:
        if args.qubits and puzzle.num_qubits != args.qubits:
            continue
        print(f"{puzzle.id:28s} {puzzle.num_qubits} qubit(s)  {puzzle.reward:3d} XP  {puzzle.title}")
        if args.verbose:
            print(f"    {puzzle.description}")
            if puzzle.hint:
                print(f"    Hint: {puzzle.hint}")


def cmd_simulate(args, config):
    """Simulate a free-form circuit from |0...0⟩."""
    qc = Circuit(args.qubits, config=config)
    for gate in args.gate or []:
        qc.add_gate(gate)
    _print_circuit(qc)
    return 0


def cmd_solve(args, config):
    """Apply gates to a puzzle and check the result."""
    from ..puzzles import PuzzleSession, get_puzzle

    session = PuzzleSession(get_puzzle(args.puzzle_id), config=config)
    print(session.puzzle.title)
    print(session.puzzle.description)
    print()

    for gate in args.gate or []:
        session.circuit.add_gate(gate)
    _print_circuit(session.circuit)

    result = session.check_solution()
    print()
    print(result.message)
    if result.valid:
        print(f"+{session.reward_earned} XP")
        return 0
    if session.puzzle.hint:
        print(f"Hint: {session.puzzle.hint}")
    return 1


def cmd_serve(args, config):
    """Start the dashboard API server."""
    from ..dashboard import launch

    launch(port=args.port, host=args.host, debug=args.debug,
           open_browser=args.browser, config=config)
    return 0


def cmd_info(args, config):
    """Show qubit-quest information."""
    from .. import __version__

    print(f"""
qubit-quest v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

The circuit engine behind a quantum-computing puzzle game.

Gates: {', '.join(t.value for t in GateType)}
Max qubits: {config.max_qubits}
Validation tolerance: {config.validation_tolerance}

Usage:
  qubit-quest puzzles -v
  qubit-quest simulate --qubits 2 --gate H:0 --gate CNOT:0:1
  qubit-quest solve puzzle-1-bit-flip --gate X:0
  qubit-quest serve
""")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='qubit-quest',
        description='Quantum circuit puzzle engine'
    )
    parser.add_argument('--log-level', default=None,
                        help='Logging level (DEBUG, INFO, WARNING, ...)')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Puzzles command
    puzzles_parser = subparsers.add_parser('puzzles', help='List puzzles')
    puzzles_parser.add_argument('--qubits', type=int, help='Only puzzles with N qubits')
    puzzles_parser.add_argument('-v', '--verbose', action='store_true',
                                help='Show descriptions and hints')
    puzzles_parser.set_defaults(func=cmd_puzzles)

    # Simulate command
    sim_parser = subparsers.add_parser('simulate', help='Simulate a circuit')
    sim_parser.add_argument('--qubits', type=int, default=1, help='Number of qubits')
    sim_parser.add_argument('--gate', type=parse_gate_spec, action='append',
                            metavar='SPEC', help='Gate as TYPE:TARGET or CNOT:CONTROL:TARGET')
    sim_parser.set_defaults(func=cmd_simulate)

    # Solve command
    solve_parser = subparsers.add_parser('solve', help='Try a solution to a puzzle')
    solve_parser.add_argument('puzzle_id', help='Puzzle id (see "puzzles")')
    solve_parser.add_argument('--gate', type=parse_gate_spec, action='append',
                              metavar='SPEC', help='Gate as TYPE:TARGET or CNOT:CONTROL:TARGET')
    solve_parser.set_defaults(func=cmd_solve)

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start the dashboard API')
    serve_parser.add_argument('--port', type=int, default=8888)
    serve_parser.add_argument('--host', default='127.0.0.1')
    serve_parser.add_argument('--debug', action='store_true')
    serve_parser.add_argument('--browser', action='store_true', help='Open a browser')
    serve_parser.set_defaults(func=cmd_serve)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show qubit-quest info')
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = EngineConfig.from_env()
    setup_logging(args.log_level or config.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args, config) or 0
    except QubitQuestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
