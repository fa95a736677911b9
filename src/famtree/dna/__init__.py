"""DNA relative-match post-processing."""

from .matches import MatchMergeResult, RelativeMatchPostProcessor

__all__ = ["RelativeMatchPostProcessor", "MatchMergeResult"]
