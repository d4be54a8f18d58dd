"""Generic filter → map → consume pipeline.

Formal Model:
    Pipeline p = (s, f, k) over a source S where:
        s: X → Bool   (selector)
        f: X → Y      (transform)
        k: Y → None   (sink)

    run(p, S) = for e in S: if s(e) then k(f(e))

Each element is fully processed before the next one is pulled from S.
"""

from rosterpipe.pipeline.capabilities import always_true, as_selector, as_sink, as_transform, discard, identity
from rosterpipe.pipeline.capture import Captured, captured, freeze
from rosterpipe.pipeline.effects import Effect, EffectLog
from rosterpipe.pipeline.engine import for_each_matching, process_elements
from rosterpipe.pipeline.registry import PipelineSpec, create_pipeline_spec, get_registry
from rosterpipe.pipeline.runner import PipelineRunner, RunStats
from rosterpipe.pipeline.stages import Stream, consume, select, transform

__all__ = [
    "for_each_matching",
    "process_elements",
    "Stream",
    "select",
    "transform",
    "consume",
    "identity",
    "always_true",
    "discard",
    "as_selector",
    "as_transform",
    "as_sink",
    "Captured",
    "captured",
    "freeze",
    "Effect",
    "EffectLog",
    "PipelineSpec",
    "create_pipeline_spec",
    "get_registry",
    "PipelineRunner",
    "RunStats",
]
