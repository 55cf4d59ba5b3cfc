"""
Convergence criteria for the K-Means engine.

Lloyd iterations have reached a fixed point when an iteration leaves every
assignment where it found it. The iteration cap is handled by the engine
itself, not by a criterion.
"""

from typing import Dict, Any

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Converged once an iteration changes no assignment."""

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check the ``n_changed`` count reported for one iteration."""
        n_changed = int(current_state['n_changed'])

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed
        })

        return n_changed == 0
