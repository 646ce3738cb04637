"""
qubit-quest Dashboard Server.

A Flask application providing:
- REST API over the circuit engine
- Puzzle catalog and solution checking
- Step-by-step state inspection for the circuit builder UI

Usage:
    from qubit_quest.dashboard import launch
    launch(port=8888)

    # Or via CLI:
    # qubit-quest serve --port 8888
"""

from __future__ import annotations

import threading
import webbrowser
from typing import Any, Dict, List, Optional

from qubit_quest.config import DEFAULT_CONFIG, EngineConfig
from qubit_quest.core import Circuit, Gate, GateType, StateVector
from qubit_quest.errors import PuzzleNotFoundError, QubitQuestError
from qubit_quest.logging_config import get_logger
from qubit_quest.performance import PerformanceMonitor
from qubit_quest.puzzles import CIRCUIT_PUZZLES, PuzzleSession, get_puzzle
from qubit_quest.visualization import StateVisualizer, bloch_coordinates, draw_circuit

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Gate metadata for the frontend
# ---------------------------------------------------------------------------

GATE_CATALOG = [
    {"type": "X", "label": "X (NOT)", "n_qubits": 1,
     "description": "Flips |0⟩↔|1⟩", "color": "#ff6b6b"},
    {"type": "H", "label": "H (Hadamard)", "n_qubits": 1,
     "description": "Creates superposition", "color": "#00d4ff"},
    {"type": "Z", "label": "Z (Phase)", "n_qubits": 1,
     "description": "Adds phase flip", "color": "#51cf66"},
    {"type": "CNOT", "label": "CNOT", "n_qubits": 2,
     "description": "Controlled NOT", "color": "#845ef7"},
    {"type": "S", "label": "S (Phase)", "n_qubits": 1,
     "description": "π/2 phase shift", "color": "#fab005"},
    {"type": "T", "label": "T (π/8)", "n_qubits": 1,
     "description": "π/4 phase shift", "color": "#f783ac"},
]


# ---------------------------------------------------------------------------
# Simulation helpers
# ---------------------------------------------------------------------------

def _parse_gates(data: dict) -> List[Gate]:
    gates = data.get("gates", [])
    if not isinstance(gates, list):
        raise QubitQuestError("'gates' must be a list")
    return [Gate.from_dict(g) for g in gates]


def _build_circuit(data: dict, config: EngineConfig = DEFAULT_CONFIG,
                   monitor: Optional[PerformanceMonitor] = None) -> Circuit:
    """Build a Circuit from the JSON circuit definition."""
    num_qubits = int(data.get("num_qubits", 2))
    initial = data.get("initial_state")
    initial_state = StateVector.from_pairs(initial) if initial else None

    qc = Circuit(num_qubits, initial_state=initial_state, config=config, monitor=monitor)
    for gate in _parse_gates(data):
        qc.add_gate(gate)
    return qc


def _state_payload(state: StateVector) -> Dict[str, Any]:
    probs = state.probabilities()
    amplitudes = []
    for i, amp in enumerate(state):
        amplitudes.append({
            "index": i,
            "bitstring": state.basis_label(i),
            "real": amp.real,
            "imag": amp.imaginary,
            "probability": float(probs[i]),
        })
    return {
        "statevector": state.to_pairs(),
        "probabilities": StateVisualizer.probabilities(state),
        "amplitudes": amplitudes,
        "bloch_coords": [bloch_coordinates(state, q) for q in range(state.num_qubits)],
        "norm": state.norm(),
    }


def _simulate(data: dict, config: EngineConfig = DEFAULT_CONFIG,
              monitor: Optional[PerformanceMonitor] = None) -> dict:
    """Run the circuit and return the final state with display data."""
    qc = _build_circuit(data, config, monitor)
    result = _state_payload(qc.state)
    result.update({
        "num_qubits": qc.num_qubits,
        "num_gates": len(qc),
        "circuit_depth": qc.depth(),
        "diagram": draw_circuit(qc),
    })
    return result


def _step_simulate(data: dict, config: EngineConfig = DEFAULT_CONFIG) -> list:
    """
    Step-by-step simulation: the state before any gate, then after each one.
    """
    qc = _build_circuit(data, config)

    initial = _state_payload(qc.initial_state)
    initial.update({"gate_index": -1, "gate": None})
    steps = [initial]

    for i, (placed, state) in enumerate(qc.steps()):
        step = _state_payload(state)
        step.update({"gate_index": i, "gate": placed.gate.to_dict(), "id": placed.id})
        steps.append(step)
    return steps


def _check_solution(puzzle_id: str, data: dict, config: EngineConfig = DEFAULT_CONFIG) -> dict:
    """Replay the submitted gates on the puzzle and validate the result."""
    session = PuzzleSession(get_puzzle(puzzle_id), config=config)
    for gate in _parse_gates(data):
        session.circuit.add_gate(gate)
    result = session.check_solution()
    return {
        "puzzle_id": puzzle_id,
        "valid": result.valid,
        "message": result.message,
        "reward": session.reward_earned,
        "statevector": session.state.to_pairs(),
    }


# ---------------------------------------------------------------------------
# Flask Application
# ---------------------------------------------------------------------------

def create_app(config: Optional[EngineConfig] = None) -> Any:
    """Create and configure the Flask application."""
    try:
        from flask import Flask, jsonify, request
    except ImportError:
        raise ImportError(
            "Flask is required for the dashboard. Install it with:\n"
            "  pip install flask"
        )

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config['ENGINE'] = config or DEFAULT_CONFIG
    monitor = PerformanceMonitor(app.config['ENGINE'])
    app.extensions['qubit_quest.monitor'] = monitor

    def _payload() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise QubitQuestError("Request body must be a JSON object")
        return data

    # ---- Errors ----

    @app.errorhandler(PuzzleNotFoundError)
    def handle_missing_puzzle(e):
        return jsonify({"error": f"Unknown puzzle: {e.args[0]}"}), 404

    @app.errorhandler(QubitQuestError)
    def handle_engine_error(e):
        logger.info("Rejected request: %s", e)
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(ValueError)
    @app.errorhandler(TypeError)
    def handle_bad_input(e):
        return jsonify({"error": f"Malformed request: {e}"}), 400

    # ---- Routes ----

    @app.route("/")
    def index():
        from qubit_quest import __version__
        return jsonify({
            "name": "qubit-quest",
            "version": __version__,
            "gate_types": [t.value for t in GateType],
            "puzzles": len(CIRCUIT_PUZZLES),
        })

    @app.route("/api/gates")
    def api_gates():
        return jsonify(GATE_CATALOG)

    @app.route("/api/puzzles")
    def api_puzzles():
        tolerance = app.config['ENGINE'].validation_tolerance
        return jsonify([p.to_dict(tolerance) for p in CIRCUIT_PUZZLES])

    @app.route("/api/puzzles/<puzzle_id>")
    def api_puzzle(puzzle_id):
        tolerance = app.config['ENGINE'].validation_tolerance
        return jsonify(get_puzzle(puzzle_id).to_dict(tolerance))

    @app.route("/api/puzzles/<puzzle_id>/check", methods=["POST"])
    def api_check(puzzle_id):
        return jsonify(_check_solution(puzzle_id, _payload(), app.config['ENGINE']))

    @app.route("/api/simulate", methods=["POST"])
    def api_simulate():
        return jsonify(_simulate(_payload(), app.config['ENGINE'], monitor))

    @app.route("/api/step", methods=["POST"])
    def api_step():
        return jsonify({"steps": _step_simulate(_payload(), app.config['ENGINE'])})

    @app.route("/api/metrics")
    def api_metrics():
        return jsonify(monitor.get_summary())

    return app


def launch(port: int = 8888, host: str = "127.0.0.1", debug: bool = False,
           open_browser: bool = True, config: Optional[EngineConfig] = None):
    """
    Launch the qubit-quest API server.

    Parameters
    ----------
    port : int
        Port to serve on (default 8888).
    host : str
        Host address (default localhost).
    debug : bool
        Enable Flask debug mode.
    open_browser : bool
        Automatically open browser.
    config : EngineConfig, optional
        Engine configuration (default: DEFAULT_CONFIG).
    """
    app = create_app(config)

    url = f"http://{host}:{port}"
    logger.info("qubit-quest dashboard listening on %s", url)

    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(url)).start()

    app.run(host=host, port=port, debug=debug)
