"""
consult_recommender.reporting — Terminal formatting for CLI output.

Modules:
  formatters — ASCII formatters for recommendations, notifications,
               profiles and stored feedback.
"""
