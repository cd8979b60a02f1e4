from meeting_digest.core import config
from meeting_digest.core.errors import ProviderError
from meeting_digest.providers.base import Provider


def get_provider() -> Provider:
    # the only place that decides between the offline mock and the live API
    if config.use_mock_responses():
        from meeting_digest.providers.mock import MockProvider
        return MockProvider()
    if not config.GOOGLE_API_KEY:
        raise ProviderError("Google API key is not configured")
    from meeting_digest.providers.gemini import GeminiProvider
    return GeminiProvider(config.GOOGLE_API_KEY)
