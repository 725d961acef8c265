"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/homepage/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
from abc import ABC, abstractmethod
from math import isclose

"""
    Class framework for tabular MDPs. States and actions are contiguous
    0-based integers; a model is read-only while any solver uses it and
    transition() must be free of side effects so that it can be queried
    from several threads.
"""
class TabularMDP(ABC):

    """
        Number of states N.
    """
    @abstractmethod
    def state_count(self):
        pass

    """
        Number of actions available in state s.
    """
    @abstractmethod
    def action_count(self, s):
        pass

    """
        Given state and action, return the finite sequence of
        (next_state, probability, reward) triples. Probabilities lie in
        (0,1] and sum to one.
    """
    @abstractmethod
    def transition(self, s, a):
        pass

    def states(self):
        return range(self.state_count())

    def actions(self, s):
        return range(self.action_count(s))


def is_terminal(model, s):
    #--------------------------------------------------------------------------
    # A state is terminal if it has a single action that loops back to the
    # state with probability one and reward zero
    #--------------------------------------------------------------------------
    if model.action_count(s) != 1:
        return False
    transitions = list(model.transition(s, 0))
    if len(transitions) != 1:
        return False
    next_state, probability, reward = transitions[0]
    return next_state == s and isclose(probability, 1.0) and reward == 0


def terminal_states(model):
    return [s for s in model.states() if is_terminal(model, s)]
