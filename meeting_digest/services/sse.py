# event channel for the streaming endpoint: one `data: <json>\n\n` frame per event
# SSEDecoder keeps a partial trailing line between reads so split frames are reassembled

import codecs
import json
from typing import Any, Dict, List


def encode_event(event: Dict[str, Any]) -> bytes:
    return f"data: {json.dumps(event)}\n\n".encode("utf-8")


class SSEDecoder:
    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""

    def feed(self, data: bytes) -> List[Dict[str, Any]]:
        self._buffer += self._utf8.decode(data)
        *lines, self._buffer = self._buffer.split("\n")
        return self._parse(lines)

    def flush(self) -> List[Dict[str, Any]]:
        self._buffer += self._utf8.decode(b"", final=True)
        lines, self._buffer = [self._buffer], ""
        return self._parse(lines)

    @staticmethod
    def _parse(lines: List[str]) -> List[Dict[str, Any]]:
        events: List[Dict[str, Any]] = []
        for line in lines:
            if not line.startswith("data: "):
                continue
            try:
                data = json.loads(line[len("data: "):])
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict):
                events.append(data)
        return events
