"""
qubit-quest dashboard: REST API over the circuit engine.

Launch with: qubit-quest serve
Or programmatically: from qubit_quest.dashboard import launch; launch()
"""

from qubit_quest.dashboard.server import create_app, launch

__all__ = ["create_app", "launch"]
