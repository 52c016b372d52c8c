"""Shortcode generators

A generator only proposes candidate codes. Uniqueness is enforced by the data
store's insert-if-absent, so generators share no state beyond, for the counter
strategy, the durable sequence kept in the data store.

Classes:
    CodeGenerator:
        Interface: generate() -> str
    CounterCodeGenerator:
        Salted permutation of the durable sequence (exactly unique until the
        sequence wraps around BASE**length).
    RandomCodeGenerator:
        Secure random codes (statistically unique, collisions detected on insert).

Functions:
    build_generator(settings, dao) -> CodeGenerator
        Build the generator selected by RegistrySettings.strategy.
"""

from abc import ABC, abstractmethod

from shortlink.constants import Shortcode, Strategy
from shortlink.dao.base import LinkBaseDAO
from shortlink.utils.config import RegistrySettings
from shortlink.utils.shortener import generate_shortcode, random_shortcode


class CodeGenerator(ABC):
    """Produce candidate shortcodes."""

    length: int

    @abstractmethod
    def generate(self) -> str:
        """Return a new candidate code.

        Raises:
            DataStoreError:
                If the generator depends on the data store and it is unreachable.
        """
        pass


class CounterCodeGenerator(CodeGenerator):
    """Derive codes from the data store's durable, atomically incremented sequence.

    Example:
        >>> generator = CounterCodeGenerator(dao, salt='my_secret')
        >>> generator.generate()  # dao.count(increment=True) -> 12345
        'Gh71WPT'
    """

    def __init__(self, dao: LinkBaseDAO, salt: str, length: int = Shortcode.DEFAULT_LENGTH):
        self.dao = dao
        self.salt = salt
        self.length = length

    def generate(self) -> str:
        counter = self.dao.count(increment=True)
        return generate_shortcode(counter, salt=self.salt, length=self.length)


class RandomCodeGenerator(CodeGenerator):
    """Draw codes from a cryptographically secure random source."""

    def __init__(self, length: int = Shortcode.DEFAULT_LENGTH):
        self.length = length

    def generate(self) -> str:
        return random_shortcode(self.length)


def build_generator(settings: RegistrySettings, dao: LinkBaseDAO) -> CodeGenerator:
    if settings.strategy == Strategy.RANDOM:
        return RandomCodeGenerator(length=settings.code_length)
    return CounterCodeGenerator(dao, salt=settings.salt, length=settings.code_length)
