"""
Strategy Registry - Translate a target description into a concrete query.

Each strategy maps to a (translator, locator kind) pair. Translators are
pure functions: the same (strategy, target) always yields the same query,
and malformed input yields a query that matches nothing rather than an
exception. New strategies are added by registering them, not by editing
the resolver.

Example:
    >>> translate(Strategy.NAME, "email")
    '[name="email"]'
    >>> translate(Strategy.XPATH, "Sign in")
    '//*[contains(text(), "Sign in")]'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union


class Strategy(Enum):
    """Named techniques for turning a target description into a query."""
    CSS = "css"         # Native query, used verbatim
    XPATH = "xpath"     # Structural path
    TEXT = "text"       # Free-text scan
    ARIA = "aria"       # aria-label / aria-labelledby
    ID = "id"           # id attribute equals
    NAME = "name"       # name attribute equals
    CLASS = "class"     # class list contains
    
    @classmethod
    def parse(cls, value: Union[str, "Strategy"]) -> "Strategy":
        """
        Accept a Strategy, its tag, or a descriptive alias.
        
        Raises:
            ValueError: If the name is not a supported strategy
        """
        if isinstance(value, Strategy):
            return value
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            supported = [s.value for s in cls]
            raise ValueError(f"Unknown strategy: '{value}'. Supported strategies: {supported}")


_ALIASES: Dict[str, str] = {
    "attribute-contains": "css",
    "tree-structural-query": "xpath",
    "text-content-scan": "text",
    "aria-label": "aria",
    "attribute-exact": "id",
    "name-attribute": "name",
    "class-attribute": "class",
}


class LocatorKind(Enum):
    """How the candidate locator executes a translated query."""
    NATIVE = "native"           # Direct query_selector
    STRUCTURAL = "structural"   # XPath, first of many matches
    TEXT_SCAN = "text_scan"     # Mark / re-query / unmark


Translator = Callable[[str], str]


@dataclass(frozen=True)
class StrategySpec:
    """A registered strategy: how to translate and how to locate."""
    strategy: Strategy
    translate: Translator
    kind: LocatorKind


def css_string(value: str) -> str:
    """Quote a value as a CSS string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\a ")
    )
    return f'"{escaped}"'


def xpath_literal(value: str) -> str:
    """Quote a value as an XPath string literal, using concat() when it holds both quote kinds."""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    pieces: List[str] = []
    for i, part in enumerate(parts):
        if part:
            pieces.append(f'"{part}"')
        if i < len(parts) - 1:
            pieces.append("'\"'")
    return f"concat({', '.join(pieces)})"


def _translate_xpath(target: str) -> str:
    if target.startswith("//") or target.startswith("(//"):
        return target
    return f"//*[contains(text(), {xpath_literal(target)})]"


def _translate_aria(target: str) -> str:
    value = css_string(target)
    return f"[aria-label={value}], [aria-labelledby={value}]"


class StrategyRegistry:
    """
    Registry of strategy specs, keyed by Strategy.
    
    Insertion order is the canonical order used when a caller supplies no
    strategies.
    """
    
    _specs: Dict[Strategy, StrategySpec] = {}
    
    @classmethod
    def register(
        cls,
        strategy: Strategy,
        translator: Translator,
        kind: LocatorKind = LocatorKind.NATIVE,
    ) -> StrategySpec:
        """
        Register a strategy.
        
        Raises:
            ValueError: If the strategy is already registered
        """
        if strategy in cls._specs:
            raise ValueError(f"Strategy '{strategy.value}' is already registered")
        spec = StrategySpec(strategy=strategy, translate=translator, kind=kind)
        cls._specs[strategy] = spec
        return spec
    
    @classmethod
    def get(cls, strategy: Union[str, Strategy]) -> StrategySpec:
        """
        Get the spec for a strategy.
        
        Raises:
            ValueError: If the strategy is not registered
        """
        strategy = Strategy.parse(strategy)
        if strategy not in cls._specs:
            raise ValueError(
                f"Strategy '{strategy.value}' is not registered. "
                f"Available strategies: {[s.value for s in cls._specs]}"
            )
        return cls._specs[strategy]
    
    @classmethod
    def list_strategies(cls) -> List[Strategy]:
        """All registered strategies in canonical order."""
        return list(cls._specs.keys())
    
    @classmethod
    def normalize(
        cls,
        strategies: Optional[Iterable[Union[str, Strategy]]],
        default: Optional[Iterable[Union[str, Strategy]]] = None,
    ) -> List[Strategy]:
        """
        Resolve a caller-supplied strategy list.
        
        Falls back to ``default`` and then to every registered strategy when
        nothing is given. Order is preserved and duplicates are dropped.
        """
        chosen = list(strategies) if strategies else []
        if not chosen:
            chosen = list(default) if default else cls.list_strategies()
        
        result: List[Strategy] = []
        for item in chosen:
            strategy = cls.get(item).strategy
            if strategy not in result:
                result.append(strategy)
        return result


def translate(strategy: Union[str, Strategy], target: str) -> str:
    """Translate a target description into a concrete query for ``strategy``."""
    return StrategyRegistry.get(strategy).translate(target)


StrategyRegistry.register(Strategy.CSS, lambda target: target)
StrategyRegistry.register(Strategy.XPATH, _translate_xpath, LocatorKind.STRUCTURAL)
StrategyRegistry.register(Strategy.TEXT, lambda target: target, LocatorKind.TEXT_SCAN)
StrategyRegistry.register(Strategy.ARIA, _translate_aria)
StrategyRegistry.register(Strategy.ID, lambda target: f"[id={css_string(target)}]")
StrategyRegistry.register(Strategy.NAME, lambda target: f"[name={css_string(target)}]")
StrategyRegistry.register(Strategy.CLASS, lambda target: f"[class~={css_string(target)}]")
