"""
Council that runs every registered analyzer concurrently and joins the results.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from .credence_config import MAX_WORKERS
from .analyzers import SignalAgent, default_agents
from .errors import ConfigurationError
from .models import AnalyzerName, NormalizedContent, SignalResult

log = logging.getLogger(__name__)

class AnalyzerCouncil:
    """Coordinates analyzers for one credibility judgment."""

    def __init__(self, max_workers: int = MAX_WORKERS):
        """Initialize council.

        Args:
            max_workers: Size of the thread pool shared by all dispatches
        """
        self.agents: List[SignalAgent] = []
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="credence-agent")
        self._lock = threading.Lock()

    def register_agent(self, agent: SignalAgent) -> None:
        """Add an agent to the council.

        Raises:
            ConfigurationError: If an agent with the same name is already registered
        """
        with self._lock:
            if any(a.name == agent.name for a in self.agents):
                raise ConfigurationError(f"Analyzer {agent.name.value} registered twice")
            self.agents.append(agent)

    @property
    def names(self) -> List[AnalyzerName]:
        with self._lock:
            return [a.name for a in self.agents]

    @staticmethod
    def _run_agent(agent: SignalAgent, content: NormalizedContent) -> SignalResult:
        """Execute agent, downgrading any failure to a neutral signal."""
        try:
            result = agent.analyze(content)
            if not isinstance(result, SignalResult):
                raise TypeError(f"expected SignalResult, got {type(result).__name__}")
            return result
        except Exception as e:
            log.warning("Analyzer %s failed, using neutral signal: %s", agent.name.value, e)
            return SignalResult.neutral(
                "Analyzer could not evaluate this content",
                reason="analyzer_error",
                error=str(e),
            )

    def dispatch(self, content: NormalizedContent) -> Dict[AnalyzerName, SignalResult]:
        """Run all agents on the content and wait for every result.

        Returns:
            Mapping of analyzer name to signal, in registration order
        """
        with self._lock:
            agents = list(self.agents)
        futures = [(agent.name, self.executor.submit(self._run_agent, agent, content))
                   for agent in agents]
        return {name: future.result() for name, future in futures}

    def shutdown(self) -> None:
        """Release the worker pool."""
        self.executor.shutdown(wait=True)

def build_default_council(max_workers: Optional[int] = None) -> AnalyzerCouncil:
    council = AnalyzerCouncil(max_workers=max_workers or MAX_WORKERS)
    for agent in default_agents():
        council.register_agent(agent)
    return council
