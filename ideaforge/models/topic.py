"""
Topic dictionary used to flavour degraded output and pick discussion sources.

Every template title contains ``{primary}`` so a fallback idea always names
the user's main keyword.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class IdeaTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str


class Topic(BaseModel):
    """A topic tag plus the static material attached to it."""

    model_config = ConfigDict(frozen=True)

    name: str
    aliases: List[str] = Field(default_factory=list, description="Terms matched against keywords")
    triggers: List[str] = Field(default_factory=list, description="Phrases matched against the raw prompt")
    subreddits: List[str] = Field(default_factory=list)
    search_hint: str = "{keyword} ideas"
    focus: str = "business"
    tech_additions: List[str] = Field(default_factory=list)
    templates: List[IdeaTemplate] = Field(default_factory=list)


DEFAULT_TOPICS = [
    {
        "name": "ai",
        "aliases": ["ai", "artificial intelligence", "machine learning", "chatgpt", "llm", "deep learning", "generative ai"],
        "triggers": ["ai", "artificial intelligence", "chatgpt", "gpt", "machine learning", "ml", "llm", "openai", "neural"],
        "subreddits": ["MachineLearning", "artificial", "OpenAI", "ChatGPT", "LocalLLaMA"],
        "search_hint": "{keyword} startup opportunities",
        "focus": "automation",
        "tech_additions": ["Python", "TensorFlow"],
        "templates": [
            {
                "title": "{primary} AI Copilot",
                "description": "An assistant that uses language models to draft, review and automate {secondary} tasks, learning from each team's own history.",
            },
            {
                "title": "{primary} Prediction Engine",
                "description": "A service that trains lightweight models on {secondary} data and surfaces forecasts and anomalies before they become problems.",
            },
        ],
    },
    {
        "name": "web-development",
        "aliases": ["web development", "web app", "website", "backend", "javascript", "nodejs", "full stack"],
        "triggers": ["web", "website", "backend", "javascript", "html", "css", "full-stack", "fullstack"],
        "subreddits": ["webdev", "javascript", "node", "programming"],
        "search_hint": "{keyword} web application",
        "focus": "developer",
        "tech_additions": ["PostgreSQL", "Docker"],
        "templates": [
            {
                "title": "{primary} Web Toolkit",
                "description": "A hosted toolkit that gives small teams ready-made building blocks for {secondary} features, with an API and a visual editor.",
            },
        ],
    },
    {
        "name": "frontend",
        "aliases": ["frontend", "front end", "react", "vue", "ui", "ux", "design system"],
        "triggers": ["frontend", "front-end", "react", "vue", "angular", "svelte", "ui", "ux"],
        "subreddits": ["Frontend", "reactjs", "webdev", "css"],
        "search_hint": "{keyword} frontend tools",
        "focus": "interface",
        "tech_additions": ["Next.js", "Tailwind CSS"],
        "templates": [
            {
                "title": "{primary} Component Studio",
                "description": "A visual workspace for designing, testing and sharing reusable {secondary} components across projects.",
            },
        ],
    },
    {
        "name": "mobile-app",
        "aliases": ["mobile app", "mobile", "android", "ios", "flutter", "react native"],
        "triggers": ["mobile", "app", "android", "ios", "iphone", "flutter", "react native"],
        "subreddits": ["androiddev", "iOSProgramming", "FlutterDev", "reactnative", "AppIdeas"],
        "search_hint": "{keyword} mobile app",
        "focus": "on-the-go",
        "tech_additions": ["React Native", "Firebase"],
        "templates": [
            {
                "title": "{primary} Pocket Companion",
                "description": "A mobile app that keeps {secondary} work within reach, with offline support, reminders and one-tap sharing.",
            },
        ],
    },
    {
        "name": "startup",
        "aliases": ["startup", "business", "entrepreneur", "entrepreneurship", "founder", "small business"],
        "triggers": ["startup", "start-up", "business", "entrepreneur", "founder"],
        "subreddits": ["startups", "entrepreneur", "Startup_Ideas", "SideProject", "indiehackers", "smallbusiness"],
        "search_hint": "{keyword} business idea",
        "focus": "business",
        "tech_additions": [],
        "templates": [
            {
                "title": "{primary} Launchpad",
                "description": "A guided workspace that takes founders from a rough {secondary} concept to a validated launch plan with checklists, templates and milestone tracking.",
            },
            {
                "title": "{primary} Metrics Hub",
                "description": "A dashboard that pulls revenue, growth and customer signals into one place so early teams can see how their {secondary} is really doing.",
            },
        ],
    },
    {
        "name": "saas",
        "aliases": ["saas", "software as a service", "subscription software", "b2b software"],
        "triggers": ["saas", "subscription", "b2b"],
        "subreddits": ["SaaS", "startups", "indiehackers", "SideProject"],
        "search_hint": "{keyword} software solution",
        "focus": "subscription",
        "tech_additions": ["Stripe"],
        "templates": [
            {
                "title": "{primary} Subscription Console",
                "description": "A SaaS back office that handles plans, billing and usage analytics for {secondary} products so teams can focus on the core product.",
            },
        ],
    },
    {
        "name": "fintech",
        "aliases": ["fintech", "finance", "banking", "payments", "cryptocurrency", "crypto", "blockchain", "trading", "investing"],
        "triggers": ["fintech", "finance", "financial", "bank", "banking", "payment", "crypto", "bitcoin", "blockchain", "defi", "invest", "investing", "investment", "trading", "money"],
        "subreddits": ["fintech", "CryptoCurrency", "investing", "personalfinance"],
        "search_hint": "{keyword} financial technology",
        "focus": "financial",
        "tech_additions": ["PostgreSQL", "Stripe API"],
        "templates": [
            {
                "title": "{primary} Money Tracker",
                "description": "A secure app that connects accounts, categorizes {secondary} transactions and explains where money goes in plain language.",
            },
        ],
    },
    {
        "name": "ecommerce",
        "aliases": ["ecommerce", "e-commerce", "online store", "shopify", "retail", "marketplace"],
        "triggers": ["ecommerce", "e-commerce", "shopify", "online store", "amazon", "dropship"],
        "subreddits": ["ecommerce", "shopify", "FulfillmentByAmazon", "smallbusiness"],
        "search_hint": "{keyword} online store",
        "focus": "storefront",
        "tech_additions": ["Shopify API", "Stripe"],
        "templates": [
            {
                "title": "{primary} Storefront Optimizer",
                "description": "A plug-in that watches {secondary} store traffic, flags drop-off points and suggests product page fixes backed by data.",
            },
        ],
    },
    {
        "name": "marketing",
        "aliases": ["marketing", "social media", "seo", "advertising", "content marketing"],
        "triggers": ["marketing", "social media", "seo", "advertising", "ads", "influencer", "newsletter"],
        "subreddits": ["marketing", "digital_marketing", "socialmedia", "SEO"],
        "search_hint": "{keyword} marketing strategy",
        "focus": "audience",
        "tech_additions": ["Next.js"],
        "templates": [
            {
                "title": "{primary} Campaign Planner",
                "description": "A planner that schedules {secondary} campaigns across channels and reports which posts actually drive sign-ups.",
            },
        ],
    },
    {
        "name": "gaming",
        "aliases": ["gaming", "game", "game development", "gamedev", "esports"],
        "triggers": ["game", "gaming", "gamedev", "unity", "unreal", "esports"],
        "subreddits": ["gamedev", "IndieGaming", "gaming", "Unity3D"],
        "search_hint": "{keyword} game concept",
        "focus": "player",
        "tech_additions": ["Unity", "C#"],
        "templates": [
            {
                "title": "{primary} Player Hub",
                "description": "A community hub where {secondary} players find teammates, track progress and share highlights.",
            },
        ],
    },
    {
        "name": "health",
        "aliases": ["health", "healthcare", "fitness", "wellness", "mental health", "medical", "nutrition"],
        "triggers": ["health", "fitness", "wellness", "medical", "workout", "nutrition", "therapy", "mental"],
        "subreddits": ["Health", "fitness", "healthIT", "mentalhealth"],
        "search_hint": "{keyword} health platform",
        "focus": "wellbeing",
        "tech_additions": ["HealthKit", "PostgreSQL"],
        "templates": [
            {
                "title": "{primary} Habit Coach",
                "description": "A coaching app that turns {secondary} goals into small daily habits, with progress check-ins and gentle nudges.",
            },
        ],
    },
    {
        "name": "education",
        "aliases": ["education", "edtech", "learning", "online learning", "teaching", "course", "students"],
        "triggers": ["education", "learning", "learn", "course", "teach", "teacher", "teaching", "student", "school", "tutor", "tutoring"],
        "subreddits": ["education", "edtech", "GetStudying", "Teachers"],
        "search_hint": "{keyword} learning platform",
        "focus": "learning",
        "tech_additions": ["PostgreSQL"],
        "templates": [
            {
                "title": "{primary} Learning Path Builder",
                "description": "A platform that assembles personalized {secondary} curricula from existing resources and tracks mastery with short quizzes.",
            },
        ],
    },
    {
        "name": "productivity",
        "aliases": ["productivity", "automation", "workflow", "task management", "time management", "no-code"],
        "triggers": ["productivity", "automation", "automate", "workflow", "task", "no-code", "nocode"],
        "subreddits": ["productivity", "automation", "nocode"],
        "search_hint": "{keyword} workflow tool",
        "focus": "workflow",
        "tech_additions": ["Zapier API"],
        "templates": [
            {
                "title": "{primary} Autopilot",
                "description": "A no-code automation layer that links the tools a team already uses and removes repetitive {secondary} steps.",
            },
        ],
    },
    {
        "name": "default",
        "aliases": [],
        "triggers": [],
        "subreddits": ["startups", "entrepreneur", "SaaS", "technology", "SideProject"],
        "search_hint": "{keyword} ideas",
        "focus": "business",
        "tech_additions": [],
        "templates": [
            {
                "title": "{primary} Management Platform",
                "description": "A comprehensive solution for organizing {secondary} workflows, built for small businesses that have outgrown spreadsheets.",
            },
            {
                "title": "AI-Powered {primary} Assistant",
                "description": "An assistant that helps teams optimize their {secondary} processes by spotting bottlenecks and suggesting next steps.",
            },
            {
                "title": "{primary} Connect",
                "description": "A mobile-first network that connects {primary} professionals with {secondary} solutions and trusted providers.",
            },
            {
                "title": "{primary} Insights Dashboard",
                "description": "A dashboard that gives decision makers {primary} analytics and {secondary} insights without needing a data team.",
            },
            {
                "title": "{primary} Marketplace",
                "description": "A marketplace that matches {primary} service providers with businesses that need {secondary} solutions.",
            },
        ],
    },
]
