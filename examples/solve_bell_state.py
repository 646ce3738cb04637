"""Example: Solve the Bell state puzzle with qubit-quest."""
from qubit_quest import PlacementController, PuzzleSession, draw_circuit, get_puzzle, show_state

print("=" * 50)
print("qubit-quest: Bell State Puzzle")
print("=" * 50)

session = PuzzleSession(get_puzzle("puzzle-4-bell-state"))
print(f"\n{session.puzzle.description}")

# Place gates the way the circuit builder UI does: pick a gate, click wires
ctl = PlacementController(session.circuit)
ctl.select_gate("H")
ctl.select_qubit(0)
ctl.select_gate("CNOT")
ctl.select_qubit(0)   # control
ctl.select_qubit(1)   # target

print()
print(draw_circuit(session.circuit))
print()
print(show_state(session.state))

result = session.check_solution()
print(f"\n{result.message} (+{session.reward_earned} XP)")
