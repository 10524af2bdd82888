"""
Services module.
"""

from dealcalc.services import analysis_store

__all__ = ["analysis_store"]
