# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import numpy as np
import pytest
from MDP.intMDP import make_int_mdp_from_matrices
from MDP.mdp import TabularMDP


#------------------------------------------------------------------------------
# Three-state chain: action 0 stays, action 1 moves right (state 1 moves to 0
# with probability 0.99 and to 2 otherwise). State 2 absorbs with reward 0.
#------------------------------------------------------------------------------
CHAIN_STAY      = np.eye(3)
CHAIN_MOVE      = np.array([[0.0,  1.0, 0.0 ],
                            [0.99, 0.0, 0.01],
                            [0.0,  0.0, 1.0 ]])
CHAIN_REWARD    = np.array([10.0, -1.0, 0.0])


class ChainMDP(TabularMDP):
    # Same chain, answered from Python lists instead of flat arrays

    def state_count(self):
        return 3

    def action_count(self, s):
        return 2

    def transition(self, s, a):
        P = CHAIN_STAY if a == 0 else CHAIN_MOVE
        return [(int(sn), float(P[s, sn]), float(CHAIN_REWARD[s])) for sn in np.nonzero(P[s])[0]]


class GamblersRuin(TabularMDP):
    """
    Capital 0..max_capital; 0 and max_capital are terminal. In state c the
    gambler bets b in 1..min(c, max_capital-c) and wins with probability
    win_prob; reaching max_capital pays 1. With noop, action 0 keeps the
    capital forever.
    """

    def __init__(self, max_capital=4, win_prob=0.5, noop=False):
        self.max_capital    = max_capital
        self.win_prob       = win_prob
        self.noop           = noop

    def state_count(self):
        return self.max_capital + 1

    def _is_end(self, s):
        return s == 0 or s == self.max_capital

    def action_count(self, s):
        if self._is_end(s):
            return 1
        return min(s, self.max_capital - s) + int(self.noop)

    def transition(self, s, a):
        if self._is_end(s):
            return [(s, 1.0, 0.0)]
        if self.noop:
            if a == 0:
                return [(s, 1.0, 0.0)]
            a -= 1
        bet = a + 1
        win = 1.0 if s + bet == self.max_capital else 0.0
        return [(s + bet, self.win_prob, win), (s - bet, 1 - self.win_prob, 0.0)]


class DuplicateMDP(TabularMDP):
    # Action 0 of state 0 lists next state 1 twice with different rewards

    def state_count(self):
        return 2

    def action_count(self, s):
        return 1

    def transition(self, s, a):
        if s == 0:
            return [(1, 0.5, 0.0), (1, 0.5, 2.0)]
        return [(1, 1.0, 0.0)]


class LateDuplicateMDP(TabularMDP):
    # States 0 and 1 loop on themselves; only the last state repeats a next state

    def state_count(self):
        return 3

    def action_count(self, s):
        return 1

    def transition(self, s, a):
        if s == 2:
            return [(0, 0.5, 1.0), (0, 0.5, 3.0)]
        return [(s, 1.0, 0.0)]


class EmptyActionMDP(TabularMDP):

    def state_count(self):
        return 2

    def action_count(self, s):
        return 1 if s == 0 else 0

    def transition(self, s, a):
        return [(0, 1.0, 0.0)]


class TrappedMDP(TabularMDP):
    # State 0 can only loop on itself with reward 1; state 1 is terminal

    def state_count(self):
        return 2

    def action_count(self, s):
        return 2 if s == 0 else 1

    def transition(self, s, a):
        if s == 0:
            return [(0, 1.0, 1.0)]
        return [(1, 1.0, 0.0)]


@pytest.fixture
def chain_int():
    return make_int_mdp_from_matrices([CHAIN_STAY, CHAIN_MOVE], [CHAIN_REWARD, CHAIN_REWARD])


@pytest.fixture
def chain_generic():
    return ChainMDP()


@pytest.fixture(params=['int', 'generic'])
def chain(request):
    if request.param == 'int':
        return make_int_mdp_from_matrices([CHAIN_STAY, CHAIN_MOVE], [CHAIN_REWARD, CHAIN_REWARD])
    return ChainMDP()


@pytest.fixture
def two_state_cycle():
    #--------------------------------------------------------------------------
    # 0 -> 1 with reward 1, 1 -> 0 with reward 0; a single action each
    #--------------------------------------------------------------------------
    return make_int_mdp_from_matrices([np.array([[0.0, 1.0], [1.0, 0.0]])], [np.array([1.0, 0.0])])


@pytest.fixture
def gamblers_ruin():
    return GamblersRuin(max_capital=4, win_prob=0.5, noop=False)


@pytest.fixture
def gamblers_ruin_noop():
    return GamblersRuin(max_capital=4, win_prob=0.5, noop=True)


@pytest.fixture
def duplicate_mdp():
    return DuplicateMDP()


@pytest.fixture
def late_duplicate_mdp():
    return LateDuplicateMDP()


@pytest.fixture
def empty_action_mdp():
    return EmptyActionMDP()


@pytest.fixture
def trapped_mdp():
    return TrappedMDP()
