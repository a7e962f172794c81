# Relevance weights per product field for text search.
FIELD_WEIGHTS = {"name": 10, "brand": 6, "sport": 4, "category": 3}
PARTIAL_MATCH_FACTOR = 0.5 # Substring (non whole-word) matches earn this share of the field weight

HIGH_MATCH_THRESHOLD = 50.0 # Match percentage for "high" quality
MEDIUM_MATCH_THRESHOLD = 25.0 # Match percentage for "medium" quality

MAX_TRACE_ENTRIES = 1000 # Entries retained by the X-Ray sink before the oldest are evicted
RECENT_FAILURES_LIMIT = 50 # Filtered-product entries reported by sink stats

CATALOG_SIZE = 200 # Number of generated demo products
CATALOG_SEED = None # Seed for price/rating/reviews generation; None = random per process
MIN_RATING = 1
MAX_RATING = 5

MAX_RESULTS_SHOWN = 12 # Products printed per apply in the CLI
