# speciesfill/config.py
from __future__ import annotations

# HTTP etiquette (https://meta.wikimedia.org/wiki/User-Agent_policy)
DEFAULT_UA = "speciesfill/0.1 (species record autofill; contact: maintainers@speciesfill.dev)"
USER_AGENT_ENV = "SPECIESFILL_USER_AGENT"
DEFAULT_TIMEOUT = 10.0

# Wikipedia / Wikidata endpoints
DEFAULT_LANG = "en"
WIKIPEDIA_API = "https://{lang}.wikipedia.org/w/api.php"
WIKIPEDIA_SUMMARY = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"
WIKIDATA_API = "https://www.wikidata.org/w/api.php"

# Search & disambiguation configuration
DEFAULT_SEARCH_LIMIT = 10
SUMMARY_CANDIDATES = 5

# Wikidata property codes
PROP_TAXON_NAME = "P225"
PROP_POPULATION = "P1082"
