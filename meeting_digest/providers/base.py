# declares the provider contract (generate / open_stream) shared by the Gemini and mock providers
# lets the digest service stay the same whichever provider the factory picks

from typing import AsyncIterator


class Provider:
    name = "base"
    # whether opening a stream should go through the retry engine
    retryable = True

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError

    async def open_stream(self, prompt: str) -> AsyncIterator[str]:
        """Return a fresh async iterator of text fragments once the stream is open."""
        raise NotImplementedError
