"""Integration config selection - rule matching over request context"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from paygate.domain.exceptions import BadRuleError, IntegrationNotFoundError, ProviderNotFoundError
from paygate.domain.models import IntegrationConfig, IntegrationRule, MethodCompany
from paygate.domain.ports import IntegrationRuleEngine

SCALAR_TYPES = (str, int, float, bool)


class RuleMatcher:
    """
    Selects an integration config from a set of rules.

    Matching:
    - Every condition field must be present in the context
    - Scalar condition: context value must be equal
    - List condition: context value must be one of the items

    Ranking: highest priority first, then the rule with more conditions.
    Two best rules tying on both and pointing at different configs is a
    configuration error, not a choice to make silently.
    """

    def __init__(self, rules: Iterable[IntegrationRule]):
        self.rules = list(rules)

    def match(self, context: Mapping[str, Any]) -> IntegrationConfig:
        candidates: List[Tuple[int, int, IntegrationRule]] = []
        for rule in self.rules:
            conditions = self._validate(rule)
            if all(self._satisfies(context.get(key), expected) for key, expected in conditions.items()):
                candidates.append((rule.priority, len(conditions), rule))

        if not candidates:
            raise IntegrationNotFoundError("No integration rule matched")

        candidates.sort(key=lambda c: (c[0], c[1]), reverse=True)
        best_priority, best_size, best = candidates[0]

        for priority, size, rule in candidates[1:]:
            if (priority, size) != (best_priority, best_size):
                break
            if self._config_id(rule) != self._config_id(best):
                raise BadRuleError(f"Rules {best.id} and {rule.id} match with equal rank")

        if best.config is None:
            raise BadRuleError(f"Rule {best.id} points at a missing config")
        return best.config

    @staticmethod
    def _validate(rule: IntegrationRule) -> Dict[str, Any]:
        conditions = rule.conditions
        if not isinstance(conditions, dict) or not conditions:
            raise BadRuleError(f"Rule {rule.id} has no conditions")
        for key, value in conditions.items():
            if isinstance(value, list):
                if not value or not all(isinstance(v, SCALAR_TYPES) for v in value):
                    raise BadRuleError(f"Rule {rule.id} has an invalid list for '{key}'")
            elif not isinstance(value, SCALAR_TYPES):
                raise BadRuleError(f"Rule {rule.id} has an invalid value for '{key}'")
        return conditions

    @staticmethod
    def _satisfies(actual: Any, expected: Any) -> bool:
        if actual is None:
            return False
        if isinstance(expected, list):
            return actual in expected
        return actual == expected

    @staticmethod
    def _config_id(rule: IntegrationRule) -> Optional[int]:
        return rule.config.id if rule.config is not None else None


class IntegrationConfigResolver:
    """
    Resolves the integration config for an action.

    Broken rules and missing rules both surface as ProviderNotFoundError;
    only the log entry tells them apart.
    """

    def __init__(self, engine: IntegrationRuleEngine, logger: Optional[logging.Logger] = None):
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)

    def resolve(
        self,
        criteria: Dict[str, Any],
        method_company: Optional[MethodCompany] = None,
    ) -> IntegrationConfig:
        context = dict(criteria)
        if method_company is not None:
            context.setdefault("provider", method_company.provider_alias)
            context.setdefault("method", method_company.method.alias)

        try:
            return self.engine.match(context)
        except BadRuleError as e:
            self.logger.error(
                "Corrupted matching rule",
                extra={"searched_fields": criteria, "error": str(e)},
            )
            raise ProviderNotFoundError("Integration config not found") from e
        except IntegrationNotFoundError as e:
            self.logger.warning(
                "Integration not found",
                extra={"searched_fields": criteria},
            )
            raise ProviderNotFoundError("Integration config not found") from e
