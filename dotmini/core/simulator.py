"""
Simulated code execution. Nothing is run: output is picked from canned replies
by matching the code text, after an artificial delay.

Input checks (missing code, wrong language, too long) fail before the delay.
RULES is evaluated in order and the first matching predicate wins.
"""
import asyncio
import logging
import random
import re
from collections.abc import Callable

from dotmini.core.errors import InvalidInput, SimulationTooLong, UnsupportedLanguage
from dotmini.models.schemas import ExecuteResult

logger = logging.getLogger(__name__)

MISSING_CODE_MESSAGE = "Missing or invalid 'code' field."
SIMULATED_STDERR = "Simulated stderr: Code might raise an error."
IMPORT_NOTE = "\n(Simulated import detected)"
NO_CODE_OUTPUT = "(No code to execute)"

_ERROR_PATTERN = re.compile(r"error|exception|raise", re.IGNORECASE)
_IMPORT_PATTERN = re.compile(r"import\s+\w+")


def default_stdout(code: str) -> str:
    return (
        "Simulated output for code starting with:\n"
        f'"{code[:50]}..."\n'
        "(Actual execution disabled for security)"
    )


def code_length(code: str) -> int:
    """Length in UTF-16 code units, as the browser client counts it."""
    return len(code.encode("utf-16-le", "surrogatepass")) // 2


Rule = tuple[Callable[[str], bool], Callable[[str], ExecuteResult]]

RULES: list[Rule] = [
    (
        lambda code: bool(_ERROR_PATTERN.search(code)),
        lambda code: ExecuteResult(stdout=None, stderr=SIMULATED_STDERR),
    ),
    (
        lambda code: bool(_IMPORT_PATTERN.search(code)),
        lambda code: ExecuteResult(stdout=default_stdout(code) + IMPORT_NOTE),
    ),
    (
        lambda code: code.strip().lower() == "print('hello world')",
        lambda code: ExecuteResult(stdout="hello world"),
    ),
    (
        lambda code: code.strip() == "",
        lambda code: ExecuteResult(stdout=NO_CODE_OUTPUT),
    ),
    (
        lambda code: True,
        lambda code: ExecuteResult(stdout=default_stdout(code)),
    ),
]


def apply_rules(code: str, rules: list[Rule] = RULES) -> ExecuteResult:
    """First matching rule's result. The last rule always matches."""
    for matches, produce in rules:
        if matches(code):
            return produce(code)
    return ExecuteResult(stdout=default_stdout(code))


class ExecutionSimulator:
    """Stateless apart from the RNG used for the delay."""

    def __init__(
        self,
        *,
        language: str = "python",
        max_code_length: int = 1000,
        delay_seconds: tuple[float, float] = (0.8, 1.8),
        rng: random.Random | None = None,
    ):
        self.language = language
        self.max_code_length = max_code_length
        self.delay_seconds = delay_seconds
        self._rng = rng or random.Random()

    def validate(self, code: object, language: object) -> str:
        """Raise the client error for a rejected request; return the code otherwise."""
        if not isinstance(code, str) or not code:
            raise InvalidInput(MISSING_CODE_MESSAGE)
        if language != self.language:
            raise UnsupportedLanguage(language, supported=self.language)
        length = code_length(code)
        if length > self.max_code_length:
            logger.warning("Code too long: %d > %d", length, self.max_code_length)
            raise SimulationTooLong()
        return code

    def _delay(self) -> float:
        low, high = self.delay_seconds
        # [low, high)
        return low + self._rng.random() * (high - low)

    async def simulate(self, code: object, language: object) -> ExecuteResult:
        code = self.validate(code, language)
        logger.warning("SIMULATING %s execution. No real code is being run.", self.language)
        await asyncio.sleep(self._delay())
        result = apply_rules(code)
        logger.info("Simulation complete (stdout=%s, stderr=%s)", result.stdout is not None, result.stderr is not None)
        return result
