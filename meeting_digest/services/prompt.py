DIGEST_PROMPT = """
You are an expert meeting analyzer. Please analyze the following meeting transcript and provide a structured summary in the following format:

## Meeting Overview
[Provide a brief, one-paragraph overview of the meeting]

## Key Decisions
[List the key decisions made during the meeting as bullet points]

## Action Items
[List the action items assigned and to whom as bullet points]

Please ensure the summary is clear, concise, and well-structured. If no decisions or action items are mentioned, state "None identified" for those sections.

Transcript:
{transcript}
"""


def build_digest_prompt(transcript: str) -> str:
    # transcript goes in verbatim; str.format would choke on braces inside it
    head, tail = DIGEST_PROMPT.split("{transcript}")
    return f"{head}{transcript}{tail}"
