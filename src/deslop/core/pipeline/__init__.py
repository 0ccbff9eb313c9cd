"""Pipeline entry point.

Submodules
----------
- ``options``: ``Thoroughness``, ``Mode`` and the validated ``PipelineOptions``.
- ``run``: ``run_pipeline``, ``AnalysisRun`` and ``PipelineResult``.

Usage::

    from deslop.core.pipeline import PipelineOptions, run_pipeline

    result = run_pipeline("./my-project", PipelineOptions(thoroughness="deep"))
    print(result.handoff_text)
"""

from deslop.core.pipeline.options import Mode, PipelineOptions, Thoroughness
from deslop.core.pipeline.run import AnalysisRun, PipelineResult, run_pipeline

__all__ = [
    "AnalysisRun",
    "Mode",
    "PipelineOptions",
    "PipelineResult",
    "Thoroughness",
    "run_pipeline",
]
