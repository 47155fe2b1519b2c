"""Orchestrators: multi-step backend pipelines (e.g. product search)."""

from src.orchestrators.products import ProductSearchOrchestrator

__all__ = ["ProductSearchOrchestrator"]
