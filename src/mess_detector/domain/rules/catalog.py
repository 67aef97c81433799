"""Built-in rule catalog: rule name -> factory for fresh rule instances."""

from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

from mess_detector.domain.errors import UnknownRuleError
from mess_detector.domain.rules import Rule
from mess_detector.domain.rules.unused_formal_parameter import UnusedFormalParameterRule

RuleFactory = Callable[[], Rule]


class RuleCatalog:
    """
    Rule registry. Instances are never shared between workers: create() builds
    new ones on every call.
    """

    _FACTORIES: Mapping[str, RuleFactory] = MappingProxyType(
        {
            UnusedFormalParameterRule.name: UnusedFormalParameterRule,
        }
    )

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._FACTORIES)

    @classmethod
    def create(cls, names: Iterable[str] | None = None) -> list[Rule]:
        """Fresh instances for ``names`` (all catalog rules when None), in the given order."""
        selected = cls.names() if names is None else list(names)
        rules: list[Rule] = []
        for name in selected:
            factory = cls._FACTORIES.get(name)
            if factory is None:
                raise UnknownRuleError(
                    f"Unknown rule '{name}'. Known rules: {', '.join(cls.names())}."
                )
            rules.append(factory())
        return rules

    @classmethod
    def factory_for(cls, names: Iterable[str] | None = None) -> Callable[[], list[Rule]]:
        """Validate ``names`` now and return a callable producing a fresh rule list per call."""
        selected = cls.names() if names is None else list(names)
        cls.create(selected)
        return lambda: cls.create(selected)
