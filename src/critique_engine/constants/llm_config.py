"""LLM configuration constants."""

# =============================================================================
# Provider settings
# =============================================================================

# Critique wording needs some variety (same default as the hosted wrapper)
DEFAULT_TEMPERATURE = 0.7

DEFAULT_PROVIDER = "openai"

# OpenAI models
DEFAULT_MODEL_OPENAI = "gpt-4.1-mini"
MODEL_OPENAI_GPT41 = "gpt-4.1"
MODEL_OPENAI_GPT41_MINI = "gpt-4.1-mini"
MODEL_OPENAI_GPT4O = "gpt-4o"
MODEL_OPENAI_GPT4O_MINI = "gpt-4o-mini"

# Anthropic models
# Note: keep as explicit pinned model ids for determinism; can be swapped by config later.
DEFAULT_MODEL_ANTHROPIC = "claude-haiku-4-5-20251001"
MODEL_ANTHROPIC_SONNET = "claude-sonnet-4-5-20250929"

# Gemini models
DEFAULT_MODEL_GEMINI = "gemini-2.5-flash"

DEFAULT_MODELS = {
    "openai": DEFAULT_MODEL_OPENAI,
    "anthropic": DEFAULT_MODEL_ANTHROPIC,
    "gemini": DEFAULT_MODEL_GEMINI,
}

# =============================================================================
# Token limits
# =============================================================================

MAX_OUTPUT_TOKENS_OPENAI = 2048
MAX_OUTPUT_TOKENS_ANTHROPIC = 2048
MAX_OUTPUT_TOKENS_GEMINI = 2048
