# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import numpy as np
from scipy.sparse import csr_matrix
from MDP.policy import as_policy, validate_policy
from utils import ConfigurationError, StructuralError


def get_policy_transitions(model, policy, s):
    #--------------------------------------------------------------------------
    # Yield (next_state, weighted probability, reward) for state s under a
    # stationary policy. Repeated next states inside one action are refused:
    # summing them silently would change risk-sensitive values.
    #--------------------------------------------------------------------------
    for a, action_prob in policy.get_action_distribution(s):
        seen = set()
        for next_state, probability, reward in model.transition(s, a):
            if next_state in seen:
                raise StructuralError('Transition ({},{}) -> {} is listed more than once; '
                                      'compress the model first.'.format(s, a, next_state))
            seen.add(next_state)
            yield next_state, action_prob*probability, reward


def _stationary_policy(model, policy):
    policy = validate_policy(model, as_policy(policy))
    if not policy.is_stationary:
        raise ConfigurationError('A Markov reward process needs a stationary policy.')
    return policy


def _dense_mrp(model, policy):
    num_state   = model.state_count()
    policy      = _stationary_policy(model, policy)
    P           = np.zeros((num_state, num_state))
    r           = np.zeros(num_state)
    for s in range(num_state):
        for next_state, probability, reward in get_policy_transitions(model, policy, s):
            P[s, next_state] += probability
            r[s]             += probability*reward
    return P, r


def mrp_inplace(P, r, model, policy):
    #--------------------------------------------------------------------------
    # Fill the caller-owned N x N matrix P and N-vector r with the transition
    # matrix and expected reward of the policy. The buffers are written only
    # once every state has been read, so a failure leaves them untouched.
    #--------------------------------------------------------------------------
    num_state = model.state_count()
    if P.shape != (num_state, num_state) or r.shape != (num_state,):
        raise ConfigurationError('MRP buffers must have shapes ({0},{0}) and ({0},).'.format(num_state))

    P_pi, r_pi  = _dense_mrp(model, policy)
    P[:]        = P_pi
    r[:]        = r_pi
    return P, r


def mrp(model, policy):
    return _dense_mrp(model, policy)


def mrp_sparse(model, policy):
    #--------------------------------------------------------------------------
    # Sparse version of mrp; preferred when every state reaches few next
    # states compared to the number of states
    #--------------------------------------------------------------------------
    num_state   = model.state_count()
    policy      = _stationary_policy(model, policy)
    rows        = []
    cols        = []
    data        = []
    r           = np.zeros(num_state)

    for s in range(num_state):
        for next_state, probability, reward in get_policy_transitions(model, policy, s):
            rows.append(s)
            cols.append(next_state)
            data.append(probability)
            r[s] += probability*reward

    P = csr_matrix((data, (rows, cols)), shape=(num_state, num_state))
    return P, r
