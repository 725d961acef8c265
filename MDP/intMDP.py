# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import numpy as np
from MDP.mdp import TabularMDP
from utils import StructuralError


def compress(next_states, probabilities, rewards):
    #--------------------------------------------------------------------------
    # Combine transitions to the same next state into one. Probabilities are
    # summed and the reward becomes the probability-weighted average, which
    # preserves expected rewards but not risk measures of the outcome.
    #--------------------------------------------------------------------------
    next_states     = np.asarray(next_states, dtype=np.int64)
    probabilities   = np.asarray(probabilities, dtype=float)
    rewards         = np.asarray(rewards, dtype=float)
    if not len(next_states) == len(probabilities) == len(rewards):
        raise StructuralError('Next states, probabilities, and rewards must have the same length.')

    unique_states, inverse  = np.unique(next_states, return_inverse=True)
    merged_prob             = np.bincount(inverse, weights=probabilities, minlength=len(unique_states))
    merged_reward           = np.bincount(inverse, weights=probabilities*rewards, minlength=len(unique_states))
    positive                = merged_prob > 0
    merged_reward[positive] = merged_reward[positive] / merged_prob[positive]
    return unique_states, merged_prob, merged_reward


class IntMDP(TabularMDP):
    """
    Tabular MDP stored in flat arrays, suitable for compiled kernels.

    The transitions of state-action pair k = state_offsets[s] + a occupy
    positions sa_offsets[k]:sa_offsets[k+1] of next_state, probability, and
    reward. The same next state may be listed more than once; the
    transitions are kept apart because merging them changes risk-sensitive
    values. Use compress() to merge them explicitly.

    Parameters
    ----------
    states : list
        states[s][a] is a tuple (next_states, probabilities, rewards).
    prob_tol : float
        Allowed deviation of the probabilities of an action from one.
    """

    def __init__(self, states, prob_tol=1e-6):
        if len(states) == 0:
            raise StructuralError('A tabular MDP needs at least one state.')

        num_state                   = len(states)
        state_offsets               = np.zeros(num_state + 1, dtype=np.int64)
        sa_lengths                  = []
        next_state_list             = []
        probability_list            = []
        reward_list                 = []

        for s, actions in enumerate(states):
            if len(actions) == 0:
                raise StructuralError('State {} has no actions.'.format(s))
            state_offsets[s + 1] = state_offsets[s] + len(actions)

            for a, (next_states, probabilities, rewards) in enumerate(actions):
                next_states     = np.asarray(next_states, dtype=np.int64)
                probabilities   = np.asarray(probabilities, dtype=float)
                rewards         = np.asarray(rewards, dtype=float)

                if not len(next_states) == len(probabilities) == len(rewards):
                    raise StructuralError('Transition arrays of ({},{}) differ in length.'.format(s, a))
                if len(next_states) == 0:
                    raise StructuralError('Action {} of state {} has no transitions.'.format(a, s))
                if np.any(next_states < 0) or np.any(next_states >= num_state):
                    raise StructuralError('Next state of ({},{}) is out of range.'.format(s, a))
                if np.any(probabilities <= 0) or np.any(probabilities > 1 + prob_tol):
                    raise StructuralError('Probabilities of ({},{}) must lie in (0,1].'.format(s, a))
                if abs(probabilities.sum() - 1.0) > prob_tol:
                    raise StructuralError('Probabilities of ({},{}) sum to {}.'.format(s, a, probabilities.sum()))

                sa_lengths.append(len(next_states))
                next_state_list.append(next_states)
                probability_list.append(probabilities)
                reward_list.append(rewards)

        self.num_state              = num_state
        self.state_offsets          = state_offsets
        self.sa_offsets             = np.concatenate(([0], np.cumsum(sa_lengths))).astype(np.int64)
        self.next_state             = np.concatenate(next_state_list)
        self.probability            = np.concatenate(probability_list)
        self.reward                 = np.concatenate(reward_list)

    def state_count(self):
        return self.num_state

    def action_count(self, s):
        return int(self.state_offsets[s + 1] - self.state_offsets[s])

    def get_next(self, s, a):
        #----------------------------------------------------------------------
        # Arrays of next states, probabilities, and rewards of (s,a); views,
        # not copies
        #----------------------------------------------------------------------
        if a < 0 or a >= self.action_count(s):
            raise IndexError('Action {} is not valid in state {}.'.format(a, s))
        k = self.state_offsets[s] + a
        i, j = self.sa_offsets[k], self.sa_offsets[k + 1]
        return self.next_state[i:j], self.probability[i:j], self.reward[i:j]

    def transition(self, s, a):
        next_states, probabilities, rewards = self.get_next(s, a)
        return list(zip(next_states.tolist(), probabilities.tolist(), rewards.tolist()))

    def expected_reward(self):
        #----------------------------------------------------------------------
        # Expected immediate reward of every state-action pair, flat over k
        #----------------------------------------------------------------------
        sa_index = np.repeat(np.arange(len(self.sa_offsets) - 1), np.diff(self.sa_offsets))
        return np.bincount(sa_index, weights=self.probability*self.reward, minlength=len(self.sa_offsets) - 1)


def make_int_mdp(model, docompress=False):
    #--------------------------------------------------------------------------
    # Copy any tabular MDP into an IntMDP. With docompress, transitions to the
    # same next state are merged, which is only valid for risk-neutral
    # objectives.
    #--------------------------------------------------------------------------
    states = []
    for s in model.states():
        actions = []
        for a in model.actions(s):
            transitions     = list(model.transition(s, a))
            next_states     = [t[0] for t in transitions]
            probabilities   = [t[1] for t in transitions]
            rewards         = [t[2] for t in transitions]
            if docompress:
                actions.append(compress(next_states, probabilities, rewards))
            else:
                actions.append((next_states, probabilities, rewards))
        states.append(actions)
    return IntMDP(states)


def make_int_mdp_from_matrices(Ps, rs, docompress=False):
    #--------------------------------------------------------------------------
    # Build an IntMDP from one transition matrix per action (rows are states)
    # and one reward per action. A reward vector holds state-action rewards,
    # a reward matrix holds state-action-next-state rewards. Zero-probability
    # entries are dropped.
    #--------------------------------------------------------------------------
    if len(Ps) == 0 or len(Ps) != len(rs):
        raise StructuralError('Need the same positive number of transition and reward arrays.')

    Ps          = [np.asarray(P, dtype=float) for P in Ps]
    rs          = [np.asarray(r, dtype=float) for r in rs]
    num_state   = Ps[0].shape[0]

    for P, r in zip(Ps, rs):
        if P.shape != (num_state, num_state):
            raise StructuralError('Transition matrices must be square and of equal size.')
        if r.shape not in [(num_state,), (num_state, num_state)]:
            raise StructuralError('Reward of shape {} does not match {} states.'.format(r.shape, num_state))

    states = []
    for s in range(num_state):
        actions = []
        for P, r in zip(Ps, rs):
            next_states = np.nonzero(P[s])[0]
            rewards     = np.full(len(next_states), r[s]) if r.ndim == 1 else r[s, next_states]
            actions.append((next_states, P[s, next_states], rewards))
        states.append(actions)

    model = IntMDP(states)
    return make_int_mdp(model, docompress=True) if docompress else model
