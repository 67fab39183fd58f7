"""tools/analyzers

Analyzer discovery: candidate assembly selection (finder.py) and the external
inspector contract (inspector.py).
"""

from .finder import find_analyzers, find_candidate_assemblies  # noqa: F401
