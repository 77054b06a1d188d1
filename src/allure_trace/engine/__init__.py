from .runner import CaseRunner, RunOutcome
from .sampler import SampleResult, Sampler

__all__ = ["CaseRunner", "RunOutcome", "SampleResult", "Sampler"]
