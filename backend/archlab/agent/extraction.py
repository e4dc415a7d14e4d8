import logging
import re

logger = logging.getLogger(__name__)

_WHOLE_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?([\s\S]*?)\n?[ \t]*```$")
_ANY_FENCE = re.compile(r"```[a-zA-Z0-9_-]*[ \t]*\n?([\s\S]*?)```")


def _strip_code_fences(text: str) -> str | None:
    fenced = _WHOLE_FENCE.match(text)
    if fenced:
        return fenced.group(1).strip()
    return None


def _extract_fenced_block(text: str) -> str | None:
    match = _ANY_FENCE.search(text)
    return match.group(1).strip() if match else None


def _slice_outer_braces(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start:end + 1]


def extract_json_text(raw_text: str | None) -> str:
    """
    Best-effort recovery of the JSON payload from a model response.

    Unwraps a response that is entirely a fenced block, otherwise prefers the
    first fenced block found anywhere, then slices from the first ``{`` to the
    last ``}``. Text without braces comes back unchanged so the JSON parser can
    report the failure. Never raises.
    """
    if not raw_text:
        return ""

    text = raw_text.strip()
    unwrapped = _strip_code_fences(text)
    if unwrapped is None:
        unwrapped = _extract_fenced_block(text)
        if unwrapped is not None:
            logger.debug("Found fenced block inside surrounding prose.")
    if unwrapped is not None:
        text = unwrapped

    sliced = _slice_outer_braces(text)
    if sliced is None:
        logger.debug("No JSON object braces in model response; returning text unchanged.")
        return raw_text if unwrapped is None else text
    return sliced
