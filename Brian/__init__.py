"""
Hybrid Brian query orchestrator
"""
