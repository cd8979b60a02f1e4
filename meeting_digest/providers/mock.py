# offline stand-in for the Gemini provider, picked by the factory only when use_mock_responses() holds
# returns a fixed summary, whole (500-1500ms pause) or as lazy fragments (50-150ms before each)

import asyncio
import random
from typing import AsyncIterator, List

from meeting_digest.providers.base import Provider

MOCK_DISCLAIMER = (
    "*This is a mock response generated for testing purposes when network connectivity is unavailable.*"
)

MOCK_STREAMING_CHUNKS: List[str] = [
    "# Meeting Summary\n\n",
    "## Key Topics Discussed\n",
    "- Project timeline and milestones\n",
    "- Resource allocation and team assignments\n",
    "- Technical challenges and solutions\n",
    "- Budget considerations and approval process\n\n",
    "## Action Items\n",
    "1. **Project Manager**: Finalize project timeline by end of week\n",
    "2. **Development Team**: Review technical requirements and provide estimates\n",
    "3. **Finance Team**: Prepare budget proposal for next quarter\n",
    "4. **All Team Members**: Submit individual progress reports by Friday\n\n",
    "## Key Decisions Made\n",
    "- Approved additional budget for new development tools\n",
    "- Decided to extend project timeline by 2 weeks for quality assurance\n",
    "- Agreed to implement weekly check-ins for better communication\n\n",
    "## Next Steps\n",
    "- Schedule follow-up meeting for next week\n",
    "- Circulate meeting notes to all stakeholders\n",
    "- Begin implementation of approved action items\n\n" + MOCK_DISCLAIMER,
]

MOCK_SUMMARY = "".join(MOCK_STREAMING_CHUNKS)


async def delay(ms: float) -> None:
    await asyncio.sleep(ms / 1000)


async def get_mock_response() -> str:
    await delay(500 + random.random() * 1000)
    return MOCK_SUMMARY


async def stream_mock_response() -> AsyncIterator[str]:
    for chunk in MOCK_STREAMING_CHUNKS:
        await delay(50 + random.random() * 100)
        yield chunk


class MockProvider(Provider):
    name = "mock"
    retryable = False

    async def generate(self, prompt: str) -> str:
        return await get_mock_response()

    async def open_stream(self, prompt: str) -> AsyncIterator[str]:
        return stream_mock_response()
