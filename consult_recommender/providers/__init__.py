"""
Data providers for the recommendation engine.

Modules
-------
base              : ExpertDirectory / MarketSignal interfaces + ProviderUnavailableError.
static            : placeholder experts and simulated / fixed market signals.
sqlite_directory  : experts from the local SQLite database.
http_directory    : experts from a JSON HTTP service (httpx).
factory           : build_providers(config) wiring.
"""
