"""Agents, tools, vector stores and pipeline definitions for retrieval augmented generation."""

__version__ = "0.1.0"