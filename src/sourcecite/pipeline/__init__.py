"""Pipeline module for sourcecite."""

from sourcecite.pipeline.article import ArticlePipeline
from sourcecite.pipeline.base import Pipeline

__all__ = ["ArticlePipeline", "Pipeline"]
