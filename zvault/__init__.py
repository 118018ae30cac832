"""
zvault - terminal front-end for a local secret and task vault.

Architecture:
- providers.py: record snapshots + collaborator protocols
- memory_provider.py / file_provider.py: store implementations
- controllers/: one reducer per view, plus the root navigation controller
- runtime.py: executes the effects returned by the controllers
- app.py: Textual host that feeds keys/resizes/timers into the runtime

Extensibility points:
1. New views: add a controller, register it in controllers/root.py
2. New storage backends: implement the Vault protocol
3. New side effects: add an Effect type, handle it in runtime.py
"""

__version__ = "0.1.0"
