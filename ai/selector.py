from typing import Optional

from documents.errors import GenerationFailure
from .providers import AnthropicProvider, GeminiProvider, OpenAIProvider

# fallback order when the preferred provider has no key
PROVIDERS = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def get_provider(preference: Optional[str], keys: dict):
    keys = keys or {}
    pref = (preference or "").lower().strip()
    if pref in PROVIDERS and keys.get(pref):
        return PROVIDERS[pref](keys)
    # Fallback to first available
    for name, cls in PROVIDERS.items():
        if keys.get(name):
            return cls(keys)
    return None


def require_provider(preference: Optional[str], keys: dict):
    provider = get_provider(preference, keys)
    if not provider:
        raise GenerationFailure("No API key provided. Set one in .env or enter a key in the sidebar.")
    return provider
