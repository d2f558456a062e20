"""Constants used throughout the application."""

# Idea count bounds
MIN_IDEA_COUNT = 1
MAX_IDEA_COUNT = 5

# Keyword bounds
MIN_KEYWORD_LIMIT = 3
MAX_KEYWORD_LIMIT = 8
LOCAL_KEYWORD_COUNT = 3
DEFAULT_KEYWORDS = ["business opportunities", "market solutions"]

# Keywords longer than this are dropped; template ideas shorten theirs to it
KEYWORD_MAX_LENGTH = 60

# IdeaRecord field limits
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
MARKET_NEED_MAX_LENGTH = 1000
TECH_STACK_MAX_ITEMS = 20

# Prompts longer than this are clipped before being embedded in instructions
PROMPT_MAX_LENGTH = 4000

# Fallback idea defaults
DEFAULT_TECH_STACK = ["React", "Node.js", "TypeScript"]
FALLBACK_DIFFICULTY = "Medium"
FALLBACK_ESTIMATED_TIME = "2-3 months"

# Estimated time used when a parsed idea names a difficulty but no duration
DIFFICULTY_TIMES = {
    "Easy": "1-2 months",
    "Medium": "3-6 months",
    "Hard": "6+ months",
}

# Words dropped by the local keyword heuristic
STOP_WORDS = frozenset({
    # articles, conjunctions, prepositions
    "a", "an", "the", "and", "or", "but", "nor", "so", "yet", "in", "on", "at",
    "to", "for", "of", "with", "by", "from", "into", "onto", "about", "around",
    "over", "under", "between", "through", "via", "as", "than", "then",
    # pronouns and determiners
    "i", "me", "my", "we", "us", "our", "you", "your", "it", "its", "they",
    "them", "their", "this", "that", "these", "those", "some", "any", "few",
    "several", "many", "much", "more", "most", "all", "each", "every", "other",
    "what", "which", "who", "whom", "where", "when", "why", "how",
    # auxiliary and modal verbs
    "is", "are", "was", "were", "be", "been", "being", "am", "have", "has",
    "had", "do", "does", "did", "will", "would", "could", "should", "can",
    "may", "might", "must", "shall",
    # generic request words
    "give", "show", "tell", "list", "suggest", "suggestions", "recommend",
    "please", "want", "need", "looking", "help", "ideas", "idea", "thoughts",
    "build", "building", "create", "creating", "make", "making", "start",
    "starting", "develop", "developing", "good", "great", "best", "cool",
    "new", "interesting", "possible", "potential", "like", "just", "also",
    "very", "really", "something", "things", "thing", "ways", "way", "get",
})

# Backoff jitter ceiling for rate-limited retries
DEFAULT_MAX_JITTER_MS = 1000

# Reddit search
REDDIT_SEARCH_URL = "https://www.reddit.com/r/{subreddit}/search.json"
CORE_SUBREDDITS = ["startups", "entrepreneur", "SaaS"]
# Posts from these communities get a relevance bonus
RELEVANT_SUBREDDITS = ["startups", "entrepreneur", "SaaS", "indiehackers"]
CONTEXT_POST_COUNT = 8
