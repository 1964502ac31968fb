"""
Movement-sequence analytics over candle series.
"""

from .markov_chain import MarkovChainCalculator
from .reversal import ReversalCalculator

__all__ = ["MarkovChainCalculator", "ReversalCalculator"]
