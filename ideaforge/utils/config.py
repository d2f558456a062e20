import os
from pathlib import Path
from dotenv import load_dotenv

class Config:
    def __init__(self):
        # Load appropriate .env file based on environment
        self.env = os.getenv("IDEAFORGE_ENV", "dev")
        self._load_env_file()

        # Project paths
        self.project_root = Path(__file__).parent.parent.parent
        topics_file = os.getenv("TOPICS_FILE")
        self.topics_file = Path(topics_file) if topics_file else None

        # Perplexity settings
        self.perplexity_api_key = os.getenv("PERPLEXITY_API_KEY", "").strip()
        self.perplexity_base_url = os.getenv("PERPLEXITY_BASE_URL", "https://api.perplexity.ai")
        self.perplexity_model = os.getenv("PERPLEXITY_MODEL", "sonar")

        # Google AI settings
        self.google_ai_api_key = os.getenv("GOOGLE_AI_API_KEY", "").strip()
        self.google_ai_model = os.getenv("GOOGLE_AI_MODEL", "gemini-2.0-flash")

        # Provider selection
        self.ai_provider = os.getenv("AI_PROVIDER", "perplexity").lower()
        self.plan_provider = os.getenv("PLAN_PROVIDER", "gemini").lower()

        # Request settings
        self.request_timeout = float(os.getenv("REQUEST_TIMEOUT", 60))
        self.max_tokens = int(os.getenv("MAX_TOKENS", 2000))
        self.temperature = float(os.getenv("TEMPERATURE", 0.7))
        self.plan_max_tokens = int(os.getenv("PLAN_MAX_TOKENS", 8192))

        # Generation settings
        self.idea_count = int(os.getenv("IDEA_COUNT", 3))
        self.keyword_limit = int(os.getenv("KEYWORD_LIMIT", 5))
        self.context_sources = [
            source.strip().lower()
            for source in os.getenv("CONTEXT_SOURCES", "research").split(",")
            if source.strip()
        ]

        # Retry settings
        self.retry_attempts = int(os.getenv("RETRY_ATTEMPTS", 3))
        self.retry_base_delay_ms = int(os.getenv("RETRY_BASE_DELAY_MS", 1000))
        self.retry_max_jitter_ms = int(os.getenv("RETRY_MAX_JITTER_MS", 1000))

        # Reddit settings
        self.reddit_user_agent = os.getenv("REDDIT_USER_AGENT", "ideaforge/1.0 (project idea generator)")
        self.reddit_max_subreddits = int(os.getenv("REDDIT_MAX_SUBREDDITS", 4))
        self.reddit_posts_per_subreddit = int(os.getenv("REDDIT_POSTS_PER_SUBREDDIT", 8))
        self.reddit_request_delay_ms = int(os.getenv("REDDIT_REQUEST_DELAY_MS", 1200))

        # MongoDB settings
        self.mongo_uri = os.getenv("MONGO_URI")
        self.mongo_db_name = os.getenv("MONGO_DB_NAME", "ideaforge")

        # Logging settings
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def _load_env_file(self):
        """Load the appropriate .env file based on the environment."""
        env_file = ".env"

        # Check for environment-specific .env file
        if self.env != "dev":
            env_specific_file = f".env.{self.env}"
            if Path(env_specific_file).exists():
                env_file = env_specific_file
                print(f"Loading environment from {env_file}")
            else:
                print(f"Warning: {env_specific_file} not found, falling back to .env")

        # Load the environment file
        load_dotenv(env_file)

# Create a global config instance
config = Config()
