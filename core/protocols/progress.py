"""Callback contract for progress reporting."""

from typing import Callable

from core.models import GenerationProgress

# Called synchronously at each state transition of a run.
ProgressSink = Callable[[GenerationProgress], None]
