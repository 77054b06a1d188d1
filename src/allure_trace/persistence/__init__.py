from .results_store import ResultsStore

__all__ = ["ResultsStore"]
