from .enrichment import enrich_screenshot, enrichment_query
from .factory import build_pipeline
from .screenshot_pipeline import PipelineRun, PipelineState, ScreenshotPipeline
from .travel_agent import TravelAgent

__all__ = [
    "ScreenshotPipeline",
    "PipelineRun",
    "PipelineState",
    "TravelAgent",
    "build_pipeline",
    "enrich_screenshot",
    "enrichment_query",
]
