"""
Resilient generation client.

Turns a prompt into model text. Owns the API key lifecycle, the retry loop
with quota-aware backoff, and an offline mode that synthesizes a skeleton
test without any network call.
"""
import logging
import random
import re
import time
from collections.abc import Callable

from tenacity import RetryCallState, RetryError, Retrying, stop_after_attempt

from unitforge.generation.backoff import ErrorAwareWait, ExponentialBackoff, QuotaBackoff
from unitforge.generation.credentials import (
    DEFAULT_ENV_VAR,
    CredentialStatus,
    CredentialStore,
    confirm,
    prompt_for_api_key,
    resolve_credential,
)
from unitforge.generation.profiles import (
    NORMAL_PROFILE,
    STRICT_QUOTA_PROFILE,
    GenerationProfile,
    shrink_prompt,
)
from unitforge.generation.transport import AnthropicTransport, Transport, TransportFactory
from unitforge.support.exceptions import (
    CredentialError,
    EmptyResponseError,
    ExhaustedRetriesError,
)
from unitforge.support.models import LLMConfig
from unitforge.support.templates import render_offline_test

logger = logging.getLogger(__name__)

DEFAULT_MODEL = LLMConfig.model
DEFAULT_COMPONENT_NAME = "UnknownComponent"

COMPONENT_NAME_PATTERN = re.compile(
    r"Here's the component to test:\s*```(?:javascript|typescript)\s*[^`]*?"
    r"(?:function|class|const)\s+([A-Za-z0-9_$]+)",
    re.DOTALL,
)
FRAMEWORK_PATTERN = re.compile(r"\busing (jest|mocha|vitest)\b", re.IGNORECASE)


def render_offline_template(prompt: str) -> str:
    """Build a placeholder test from whatever the prompt reveals."""
    match = COMPONENT_NAME_PATTERN.search(prompt)
    name = match.group(1) if match else DEFAULT_COMPONENT_NAME
    framework_match = FRAMEWORK_PATTERN.search(prompt)
    framework = framework_match.group(1).lower() if framework_match else "jest"
    return render_offline_test(name, is_class="class " in prompt, framework=framework)


class GenerationClient:
    """
    Sends prompts to the model, one at a time.

    Construction never blocks on terminal input: if no key is found and
    interactive mode is on, the prompt happens on the first generate() call.
    Without a key in non-interactive mode construction raises CredentialError,
    unless the client is offline.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
        max_retries: int | None = None,
        interactive: bool = True,
        strict_quota: bool = False,
        offline: bool = False,
        *,
        env_var: str = DEFAULT_ENV_VAR,
        credential_store: CredentialStore | None = None,
        transport_factory: TransportFactory = AnthropicTransport,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        input_func: Callable[[str], str] = input,
    ):
        self.model = model
        self.timeout = timeout
        self.interactive = interactive
        self.offline = offline
        self.profile: GenerationProfile = (
            STRICT_QUOTA_PROFILE if strict_quota else NORMAL_PROFILE
        )
        if max_retries is not None and max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        self._max_retries = max_retries
        self._store = credential_store or CredentialStore()
        self._transport_factory = transport_factory
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._input = input_func

        self._api_key: str | None = None
        self._transport: Transport | None = None

        outcome = resolve_credential(
            api_key,
            env_var=env_var,
            store=self._store,
            interactive=interactive,
        )
        self.credential_status = outcome.status
        if outcome.status is CredentialStatus.RESOLVED:
            logger.debug("API key resolved from %s", outcome.source)
            self._api_key = outcome.api_key
            self._initialize_client()
        elif outcome.status is CredentialStatus.FATAL and not offline:
            raise CredentialError(
                "API key is required. Set it via options, the "
                f"{env_var} environment variable, or a unitforge.json config file."
            )

    @classmethod
    def from_config(cls, config: LLMConfig, api_key: str | None = None, **kwargs):
        return cls(
            api_key=api_key,
            model=config.model,
            timeout=config.timeout,
            max_retries=config.max_retries,
            interactive=config.interactive,
            strict_quota=config.strict_quota,
            offline=config.offline,
            env_var=config.api_key_env_var,
            **kwargs,
        )

    @property
    def max_retries(self) -> int:
        if self._max_retries is not None:
            return self._max_retries
        return self.profile.max_retries

    @property
    def strict_quota(self) -> bool:
        return self.profile is STRICT_QUOTA_PROFILE

    def _initialize_client(self) -> None:
        self._transport = self._transport_factory(self._api_key, self.model, self.timeout)

    # -- mutators --------------------------------------------------------

    def set_model(self, model: str) -> "GenerationClient":
        self.model = model
        if self._api_key:
            self._initialize_client()
        return self

    def set_api_key(self, api_key: str) -> "GenerationClient":
        self._api_key = api_key
        self.credential_status = CredentialStatus.RESOLVED
        self._initialize_client()
        return self

    def set_strict_quota(self, enabled: bool) -> "GenerationClient":
        self.profile = STRICT_QUOTA_PROFILE if enabled else NORMAL_PROFILE
        return self

    def set_offline(self, enabled: bool) -> "GenerationClient":
        self.offline = enabled
        return self

    # -- requests --------------------------------------------------------

    def generate(self, prompt: str) -> str:
        """
        Return model text for ``prompt``.

        Raises:
            CredentialError: No key could be obtained.
            ExhaustedRetriesError: Every attempt failed.
        """
        if self.offline:
            logger.info("Offline mode - generating a template test without calling the model")
            return render_offline_template(prompt)

        if self.credential_status is CredentialStatus.NEEDS_INTERACTIVE:
            self._acquire_interactive_credential()

        if self._transport is None:
            raise CredentialError("API key is required to generate tests.")

        return self._send_with_retries(prompt)

    def _acquire_interactive_credential(self) -> None:
        api_key = prompt_for_api_key(self._input)
        if not api_key:
            raise CredentialError("API key is required to generate tests.")

        self.set_api_key(api_key)

        if confirm("Would you like to save this API key for future use?", self._input):
            try:
                path = self._store.save(api_key)
                logger.info("API key saved to %s", path)
            except OSError as e:
                logger.warning("Failed to save API key to config file: %s", e)

    def _send_with_retries(self, prompt: str) -> str:
        profile = self.profile
        final_prompt = shrink_prompt(prompt, profile)
        if final_prompt is not prompt:
            logger.info(
                "Using reduced prompt size (%d chars) to stay within quota limits",
                len(final_prompt),
            )

        max_retries = self.max_retries
        wait = ErrorAwareWait(
            quota=QuotaBackoff(rng=self._rng),
            transient=ExponentialBackoff(profile.base_delay),
        )

        def pre_request_wait(retry_state: RetryCallState) -> None:
            if profile.pre_request_wait:
                low, high = profile.pre_request_wait
                delay = low + self._rng.random() * (high - low)
                logger.info("Strict quota mode - waiting %.0f seconds before request...", delay)
                self._sleep(delay)

        def log_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            delay = retry_state.next_action.sleep
            if wait.strategy_for(error) is wait.quota:
                logger.warning("Quota limit hit. Waiting %.0f seconds before retry...", delay)
            else:
                logger.warning(
                    "Model request failed (%s), retrying in %.0fs (attempt %d/%d)",
                    error,
                    delay,
                    retry_state.attempt_number,
                    max_retries,
                )

        retrying = Retrying(
            stop=stop_after_attempt(max_retries),
            wait=wait,
            sleep=self._sleep,
            before=pre_request_wait,
            before_sleep=log_retry,
        )
        try:
            return retrying(self._request, final_prompt, profile)
        except RetryError as e:
            raise ExhaustedRetriesError(max_retries, e.last_attempt.exception()) from e

    def _request(self, prompt: str, profile: GenerationProfile) -> str:
        text = self._transport.send(prompt, profile)
        if not text or not text.strip():
            raise EmptyResponseError("Empty response from model")
        return text
