"""
Extraction of test code from raw model responses.
"""
import re

CODE_BLOCK_PATTERN = re.compile(r"```[\w.+#-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)
NON_CODE_LINE_PATTERN = re.compile(r"^(?:#.*|>.*|Explanation:.*)$", re.MULTILINE)


def extract_code(response: str | None) -> str:
    """
    Return the code carried by a model response.

    Fenced blocks win and are joined with a blank line. Without fences the
    whole text is used minus headings, quotes and "Explanation:" lines.
    An empty string means the response held no usable code.
    """
    if not response:
        return ""

    blocks = CODE_BLOCK_PATTERN.findall(response)
    if blocks:
        bodies = [block.lstrip("\r\n").rstrip() for block in blocks]
        return "\n\n".join(body for body in bodies if body)

    return NON_CODE_LINE_PATTERN.sub("", response).strip()
