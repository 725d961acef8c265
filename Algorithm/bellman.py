# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import numpy as np
from functools import partial
from numba import jit, prange
from numba.core.errors import NumbaDeprecationWarning, NumbaPendingDeprecationWarning, NumbaPerformanceWarning
import warnings
from MDP.intMDP import IntMDP
from MDP.objective import FiniteHorizon, InfiniteHorizon, TotalReward
from MDP.policy import StationaryDeterministic
from utils import ConfigurationError, EmptyActionSetError
warnings.simplefilter('ignore', category=NumbaDeprecationWarning)
warnings.simplefilter('ignore', category=NumbaPendingDeprecationWarning)
warnings.simplefilter('ignore', category=NumbaPerformanceWarning)


@jit(nopython=True, nogil=True)
def bellman_sweep_int(state_offsets, sa_offsets, next_state, probability, reward, discount, v, out_value, out_action):
    #----------------------------------------------------------------------
    # One Jacobi sweep over all states of an IntMDP. Every state reads only
    # v and writes only its own cells of out_value and out_action, so the
    # loop over states can be split across threads. Ties go to the lowest
    # action index.
    #----------------------------------------------------------------------
    for s in prange(len(state_offsets) - 1):
        best_value  = -np.inf
        best_action = -1
        for a in range(state_offsets[s + 1] - state_offsets[s]):
            k = state_offsets[s] + a
            q = 0.0
            for i in range(sa_offsets[k], sa_offsets[k + 1]):
                q += probability[i]*(reward[i] + discount*v[next_state[i]])
            if q > best_value:
                best_value  = q
                best_action = a
        out_value[s]  = best_value
        out_action[s] = best_action


bellman_sweep_int_parallel = jit(nopython=True, nogil=True, parallel=True)(bellman_sweep_int.py_func)


def get_discount(objective):
    #--------------------------------------------------------------------------
    # Discount applied to the continuation value
    #--------------------------------------------------------------------------
    if isinstance(objective, TotalReward):
        return 1.0
    elif isinstance(objective, (FiniteHorizon, InfiniteHorizon)):
        return objective.discount
    else:
        raise ConfigurationError('Objective of type (' + type(objective).__name__ + ') is not implemented!')


def qvalue(model, objective, t, s, a, v):
    #--------------------------------------------------------------------------
    # Immediate reward of (s,a) plus the discounted expectation of v over the
    # next states. t is the decision stage; transitions are time-invariant.
    #--------------------------------------------------------------------------
    discount = get_discount(objective)
    if isinstance(model, IntMDP):
        next_states, probabilities, rewards = model.get_next(s, a)
        return float(probabilities @ (rewards + discount*np.asarray(v)[next_states]))

    value = 0.0
    for next_state, probability, reward in model.transition(s, a):
        value += probability*(reward + discount*v[next_state])
    return value


def qvalues_inplace(out, model, objective, t, s, v):
    #--------------------------------------------------------------------------
    # Write the q-values of state s into out; entries past the number of
    # actions of s are set to -inf so that they are never selected
    #--------------------------------------------------------------------------
    num_act = model.action_count(s)
    if num_act <= 0:
        raise EmptyActionSetError('State {} has no actions.'.format(s))
    if len(out) < num_act:
        raise ConfigurationError('Q-value buffer holds {} entries, state {} has {} actions.'.format(len(out), s, num_act))
    for a in range(num_act):
        out[a] = qvalue(model, objective, t, s, a, v)
    out[num_act:] = -np.inf
    return out


def qvalues(model, objective, t, s, v):
    return qvalues_inplace(np.empty(model.action_count(s)), model, objective, t, s, v)


def bellman_greedy(model, objective, t, s, v):
    #--------------------------------------------------------------------------
    # Bellman operator value and greedy action of state s
    #--------------------------------------------------------------------------
    num_act = model.action_count(s)
    if num_act <= 0:
        raise EmptyActionSetError('State {} has no actions.'.format(s))

    best_value  = -np.inf
    best_action = -1
    for a in range(num_act):
        q = qvalue(model, objective, t, s, a, v)
        if q > best_value:
            best_value  = q
            best_action = a
    return best_value, best_action


def bellman(model, objective, t, s, v):
    return bellman_greedy(model, objective, t, s, v)[0]


def policy_qvalue(model, objective, t, s, policy, v):
    #--------------------------------------------------------------------------
    # Q-value of the action choice of a fixed policy at stage t
    #--------------------------------------------------------------------------
    return sum(prob*qvalue(model, objective, t, s, a, v)
               for a, prob in policy.get_action_distribution(s, t))


def _sweep_states(model, objective, t, v, out_value, out_action, state_list):
    for s in state_list:
        out_value[s], out_action[s] = bellman_greedy(model, objective, t, s, v)


def _policy_sweep_states(model, objective, t, v, policy, out_value, state_list):
    for s in state_list:
        out_value[s] = policy_qvalue(model, objective, t, s, policy, v)


def bellman_sweep(model, objective, t, v, out_value, out_action, pool=None, num_chunks=1, parallel=False):
    #--------------------------------------------------------------------------
    # Apply the Bellman operator to every state, reading only v. With a
    # thread pool, states are split in chunks; each chunk writes only its
    # own cells. For an IntMDP the compiled kernel is used and `parallel`
    # selects its multi-threaded version.
    #--------------------------------------------------------------------------
    if isinstance(model, IntMDP):
        kernel = bellman_sweep_int_parallel if parallel else bellman_sweep_int
        kernel(model.state_offsets, model.sa_offsets, model.next_state, model.probability,
               model.reward, get_discount(objective), np.ascontiguousarray(v, dtype=float),
               out_value, out_action)
        return out_value, out_action

    if pool is None:
        _sweep_states(model, objective, t, v, out_value, out_action, model.states())
    else:
        pool.map(partial(_sweep_states, model, objective, t, v, out_value, out_action),
                 np.array_split(np.arange(model.state_count()), max(1, num_chunks)))
    return out_value, out_action


def policy_sweep(model, objective, t, v, policy, out_value, pool=None, num_chunks=1):
    #--------------------------------------------------------------------------
    # Same as bellman_sweep, but following the fixed policy instead of
    # maximizing
    #--------------------------------------------------------------------------
    if pool is None:
        _policy_sweep_states(model, objective, t, v, policy, out_value, model.states())
    else:
        pool.map(partial(_policy_sweep_states, model, objective, t, v, policy, out_value),
                 np.array_split(np.arange(model.state_count()), max(1, num_chunks)))
    return out_value


def greedy_inplace(actions, model, objective, v, t=0):
    #--------------------------------------------------------------------------
    # Fill actions with the greedy policy of v
    #--------------------------------------------------------------------------
    num_state = model.state_count()
    if len(actions) != num_state:
        raise ConfigurationError('Policy buffer holds {} entries, model has {} states.'.format(len(actions), num_state))
    bellman_sweep(model, objective, t, np.asarray(v, dtype=float), np.empty(num_state), actions)
    return actions


def greedy(model, objective, v, t=0):
    actions = np.zeros(model.state_count(), dtype=np.int64)
    return StationaryDeterministic(greedy_inplace(actions, model, objective, v, t))
