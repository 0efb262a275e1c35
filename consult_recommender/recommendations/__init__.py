"""
Recommendation engine: converts a client profile into ranked consulting
recommendations with human-readable reasoning.

Modules
-------
rules         : decision tables + pure heuristics (experience, history,
                budget, season, company size) — no I/O.
engine        : RecommendationEngine with the five async generators and
                generate_all_recommendations().
ranker        : priority/confidence ordering + top_n() + group_by_type().
notifications : SmartNotificationEngine — top recommendations as alerts.
insights      : build_insights() bundle for the dashboard.
reporter      : write_recommendation_csv() + write_recommendation_json().
"""
