"""
Alias resolution.

Deferred aliases are resolved against the growing set of materialised
tokens by bounded relaxation: with N aliases outstanding, at most N rounds
are needed for any acyclic chain, so whatever is left after N rounds is
either missing its target or part of a cycle.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog
from .errors import AliasTargetUnresolved
from .ir.tokens import Alias, Token

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Outcome of resolving a set of deferred aliases."""

    materialized: dict[str, Token] = field(default_factory=dict)
    resolved: list[str] = field(default_factory=list)
    unresolved: list[Alias] = field(default_factory=list)
    rounds: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)


class AliasResolver:
    """Resolves deferred aliases to a fixpoint."""

    def resolve(
        self,
        deferred: Mapping[str, Alias],
        materialized: Mapping[str, Token],
    ) -> ResolutionResult:
        """
        Materialise every alias whose target (directly or through a chain)
        is materialised.

        Each round reads a snapshot of the materialised set taken at the
        start of the round, so the order of aliases within a round never
        affects the outcome. Newly resolved aliases become visible to the
        next round.

        Args:
            deferred: Aliases keyed by their own key.
            materialized: Already materialised tokens. Not modified.

        Returns:
            ResolutionResult whose ``materialized`` extends the input with
            the resolved aliases, appended in resolution order.
        """
        result = ResolutionResult(materialized=dict(materialized))
        log = DiagnosticLog(result.diagnostics)
        worklist = list(deferred.values())
        max_rounds = len(worklist)

        while worklist and result.rounds < max_rounds:
            result.rounds += 1
            snapshot = dict(result.materialized)
            pending: list[Alias] = []

            for alias in worklist:
                target = snapshot.get(alias.target_key)
                if target is None:
                    pending.append(alias)
                    continue
                result.materialized[alias.key] = Token(
                    key=alias.key,
                    type=alias.declared_type,
                    raw_value=alias.raw_value,
                    variable_type=target.variable_type,
                    is_alias_ref=True,
                    target_key=alias.target_key,
                )
                result.resolved.append(alias.key)

            logger.debug(
                "Alias round %d: resolved %d, %d pending",
                result.rounds,
                len(worklist) - len(pending),
                len(pending),
            )
            if len(pending) == len(worklist):
                # No progress: nothing left can ever resolve
                worklist = pending
                break
            worklist = pending

        for alias in worklist:
            error = AliasTargetUnresolved(
                f"Alias target {alias.target_key!r} not found (missing or cyclic)"
            )
            log.record(
                DiagnosticKind.ALIAS_UNRESOLVED, alias.key, error.message, name=alias.key
            )
        result.unresolved = worklist
        return result


def resolve_aliases(
    deferred: Mapping[str, Alias], materialized: Mapping[str, Token]
) -> ResolutionResult:
    """Convenience wrapper around ``AliasResolver().resolve``."""
    return AliasResolver().resolve(deferred, materialized)
