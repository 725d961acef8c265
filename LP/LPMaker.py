# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
from collections import namedtuple
import numpy as np
from scipy.sparse import coo_matrix
from Algorithm.bellman import get_discount
from MDP.mdp import is_terminal
from MDP.objective import TotalReward
from utils import EmptyActionSetError


"""
    Components of an LP over one variable per state: rows  constr_matrix @ v
    <= RHS, variable bounds lb/ub, and for every row the state-action pair
    it was generated from. The rows of state s are
    row_offsets[s]:row_offsets[s+1], in the order of the actions.
"""
LPComponents = namedtuple('LPComponents',
                          ['constr_matrix', 'RHS', 'lb', 'ub', 'row_state', 'row_action', 'row_offsets'])


def _collect_rows(model, coef_diag, coef_next, rhs_of, skip_terminal):
    #--------------------------------------------------------------------------
    # One row per (s,a):  coef_diag*v(s) + coef_next*sum_s' P(s,a,s')v(s')
    # <= rhs_of(transitions). Repeated next states and self loops are
    # summed when the sparse matrix is assembled.
    #--------------------------------------------------------------------------
    num_state       = model.state_count()
    lb              = np.full(num_state, -np.inf)
    ub              = np.full(num_state,  np.inf)
    row_ind         = []
    col_ind         = []
    data            = []
    RHS             = []
    row_state       = []
    row_action      = []
    row_offsets     = np.zeros(num_state + 1, dtype=np.int64)
    row             = 0

    for s in range(num_state):
        num_action = model.action_count(s)
        if num_action == 0:
            raise EmptyActionSetError('State {} has no actions.'.format(s))

        if skip_terminal and is_terminal(model, s):
            lb[s] = 0.0
            ub[s] = 0.0
            row_offsets[s + 1] = row
            continue

        for a in range(num_action):
            transitions = list(model.transition(s, a))
            row_ind.append(row)
            col_ind.append(s)
            data.append(coef_diag)
            for next_state, probability, _ in transitions:
                row_ind.append(row)
                col_ind.append(next_state)
                data.append(coef_next*probability)
            RHS.append(rhs_of(transitions))
            row_state.append(s)
            row_action.append(a)
            row += 1
        row_offsets[s + 1] = row

    constr_matrix = coo_matrix((data, (row_ind, col_ind)), shape=(row, num_state)).tocsr()
    constr_matrix.eliminate_zeros()
    return LPComponents(constr_matrix   = constr_matrix,
                        RHS             = np.asarray(RHS, dtype=float),
                        lb              = lb,
                        ub              = ub,
                        row_state       = np.asarray(row_state, dtype=np.int64),
                        row_action      = np.asarray(row_action, dtype=np.int64),
                        row_offsets     = row_offsets)


def _expected_reward(transitions):
    return sum(probability*reward for _, probability, reward in transitions)


def make_value_LP(model, objective):
    #--------------------------------------------------------------------------
    # Primal LP of the optimal value:  v(s) >= r(s,a) + discount*E[v(s')]
    # for every (s,a), written as  -v(s) + discount*E[v(s')] <= -r(s,a).
    # Under the total reward objective terminal states carry no rows and
    # their value is fixed at zero.
    #--------------------------------------------------------------------------
    discount = get_discount(objective)
    return _collect_rows(model,
                         coef_diag      = -1.0,
                         coef_next      = discount,
                         rhs_of         = lambda transitions: -_expected_reward(transitions),
                         skip_terminal  = isinstance(objective, TotalReward))


def make_transience_LP(model, all_policies):
    #--------------------------------------------------------------------------
    # Expected time to absorption, v = 0 on terminal states.
    #   some policy:   v(s) - E[v(s')] <= 1   for every non-terminal (s,a);
    #                  max sum v is bounded iff some policy is transient.
    #   every policy:  v(s) - E[v(s')] >= 1   for every non-terminal (s,a);
    #                  feasible iff every policy is transient.
    #--------------------------------------------------------------------------
    if all_policies:
        return _collect_rows(model, -1.0, 1.0, lambda transitions: -1.0, skip_terminal=True)
    return _collect_rows(model, 1.0, -1.0, lambda transitions: 1.0, skip_terminal=True)
