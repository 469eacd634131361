"""
Request profiles for the generation client.
"""
from dataclasses import dataclass

TRIM_MARKER = "\n\n[Content trimmed to reduce token usage]\n\n"


@dataclass(frozen=True)
class GenerationProfile:
    """Retry budget, pacing and sampling settings for one usage style."""
    name: str
    max_retries: int
    base_delay: float
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int
    # (min, max) seconds slept before every attempt
    pre_request_wait: tuple[float, float] | None = None
    # prompts longer than this keep only head and tail
    prompt_char_limit: int | None = None
    prompt_keep_chars: int = 600


NORMAL_PROFILE = GenerationProfile(
    name="normal",
    max_retries=3,
    base_delay=2.0,
    temperature=0.2,
    top_k=40,
    top_p=0.95,
    max_output_tokens=4096,
)

STRICT_QUOTA_PROFILE = GenerationProfile(
    name="strict-quota",
    max_retries=5,
    base_delay=30.0,
    temperature=0.1,
    top_k=20,
    top_p=0.8,
    max_output_tokens=1024,
    pre_request_wait=(30.0, 45.0),
    prompt_char_limit=2000,
    prompt_keep_chars=600,
)


def shrink_prompt(prompt: str, profile: GenerationProfile) -> str:
    """Cut an oversized prompt down to its head and tail."""
    limit = profile.prompt_char_limit
    if limit is None or len(prompt) <= limit:
        return prompt
    keep = profile.prompt_keep_chars
    return prompt[:keep] + TRIM_MARKER + prompt[-keep:]
