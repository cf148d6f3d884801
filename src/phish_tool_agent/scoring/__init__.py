"""Heuristic scoring engine."""

from phish_tool_agent.scoring.heuristics import SCORE_RULES, ScoreRule, score_tool_results

__all__ = ["SCORE_RULES", "ScoreRule", "score_tool_results"]
