"""Inventory of active AWS SageMaker compute for cost and usage audits."""

__version__ = "0.1.0"
