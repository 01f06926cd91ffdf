"""
Orchestrator — Scheduling and running analysis passes

- ChangeScheduler: debounced, per-document pass scheduling
- DocumentAnalyzer: one extract -> filter -> prune -> review pass
- IOPool / RateLimiter: bounded, rate-limited reviewer fan-out
- Task / TaskResult / io_task: units of pooled work
- OrchestratorConfig: RETRO_* environment settings

Usage:
    from retro.orchestrator import DocumentAnalyzer, IOPool, OrchestratorConfig

    pool = IOPool(OrchestratorConfig.from_env())
    analyzer = DocumentAnalyzer(cache, symbols, client, pool)
    analyzer.handle_document_change(document)
"""

from .config import OrchestratorConfig
from .task import Task, TaskStatus, TaskResult, io_task
from .pools import IOPool, RateLimiter
from .scheduler import ChangeScheduler, DEFAULT_DEBOUNCE_SECONDS
from .analyzer import DocumentAnalyzer, AnalysisReport, SymbolProvider, DiagnosticsProvider

__all__ = [
    "OrchestratorConfig",
    "Task", "TaskStatus", "TaskResult", "io_task",
    "IOPool", "RateLimiter",
    "ChangeScheduler", "DEFAULT_DEBOUNCE_SECONDS",
    "DocumentAnalyzer", "AnalysisReport", "SymbolProvider", "DiagnosticsProvider",
]
