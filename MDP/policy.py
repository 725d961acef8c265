# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import numpy as np
from MDP.objective import FiniteHorizon, as_objective
from utils import ConfigurationError

"""
    Tabular policies. A roll-out engine only needs get_action and
    get_action_distribution; the solvers read the underlying arrays.
"""
class Policy:
    is_stationary: bool     = True
    is_deterministic: bool  = True

    def get_action(self, state, t=0):
        pass

    def get_action_distribution(self, state, t=0):
        pass


class StationaryDeterministic(Policy):

    def __init__(self, actions):
        self.actions = np.asarray(actions, dtype=np.int64)
        if self.actions.ndim != 1:
            raise ConfigurationError('Stationary deterministic policy must be a vector of actions.')

    def get_action(self, state, t=0):
        return int(self.actions[state])

    def get_action_distribution(self, state, t=0):
        return [(int(self.actions[state]), 1.0)]

    def __eq__(self, other):
        return isinstance(other, StationaryDeterministic) and np.array_equal(self.actions, other.actions)

    def __len__(self):
        return len(self.actions)

    def __repr__(self):
        return 'StationaryDeterministic({})'.format(self.actions.tolist())


class StationaryRandomized(Policy):
    is_deterministic = False

    def __init__(self, probabilities):
        #----------------------------------------------------------------------
        # probabilities[s][a] is the probability of action a in state s
        #----------------------------------------------------------------------
        self.probabilities = [np.asarray(p, dtype=float) for p in probabilities]

    def get_action(self, state, t=0):
        raise ConfigurationError('A randomized policy has no single action; use get_action_distribution.')

    def get_action_distribution(self, state, t=0):
        return [(a, float(p)) for a, p in enumerate(self.probabilities[state]) if p > 0]

    def __len__(self):
        return len(self.probabilities)


class MarkovDeterministic(Policy):
    is_stationary = False

    def __init__(self, actions):
        #----------------------------------------------------------------------
        # actions[t][s]: row t is the decision at time t+1
        #----------------------------------------------------------------------
        self.actions = np.asarray(actions, dtype=np.int64)
        if self.actions.ndim != 2:
            raise ConfigurationError('Markov deterministic policy must be a (horizon, states) array.')

    def get_action(self, state, t=0):
        return int(self.actions[t][state])

    def get_action_distribution(self, state, t=0):
        return [(int(self.actions[t][state]), 1.0)]

    def __getitem__(self, t):
        return StationaryDeterministic(self.actions[t])

    def __len__(self):
        return len(self.actions)


class MarkovRandomized(Policy):
    is_stationary       = False
    is_deterministic    = False

    def __init__(self, probabilities):
        self.probabilities = [[np.asarray(p, dtype=float) for p in stage] for stage in probabilities]

    def get_action(self, state, t=0):
        raise ConfigurationError('A randomized policy has no single action; use get_action_distribution.')

    def get_action_distribution(self, state, t=0):
        return [(a, float(p)) for a, p in enumerate(self.probabilities[t][state]) if p > 0]

    def __getitem__(self, t):
        return StationaryRandomized(self.probabilities[t])

    def __len__(self):
        return len(self.probabilities)


def as_policy(policy):
    #--------------------------------------------------------------------------
    # Plain integer arrays are read as deterministic policies: a vector is
    # stationary, a matrix is indexed by (time, state)
    #--------------------------------------------------------------------------
    if isinstance(policy, Policy):
        return policy
    actions = np.asarray(policy)
    if actions.ndim == 1:
        return StationaryDeterministic(actions)
    if actions.ndim == 2:
        return MarkovDeterministic(actions)
    raise ConfigurationError('Policy of type (' + type(policy).__name__ + ') is not implemented!')


def validate_policy(model, policy, horizon=None):
    #--------------------------------------------------------------------------
    # Every selected action must be a valid action of its state
    #--------------------------------------------------------------------------
    policy      = as_policy(policy)
    num_state   = model.state_count()
    stages      = [policy] if policy.is_stationary else [policy[t] for t in range(len(policy))]

    if not policy.is_stationary and horizon is not None and len(policy) < horizon:
        raise ConfigurationError('Policy covers {} stages, horizon is {}.'.format(len(policy), horizon))

    for stage in stages:
        if len(stage) != num_state:
            raise ConfigurationError('Policy covers {} states, model has {}.'.format(len(stage), num_state))
        for s in range(num_state):
            num_act = model.action_count(s)
            if stage.is_deterministic:
                a = stage.actions[s]
                if a < 0 or a >= num_act:
                    raise ConfigurationError('Action {} is not valid in state {}.'.format(a, s))
            else:
                prob = stage.probabilities[s]
                if len(prob) > num_act or np.any(prob < 0) or not np.isclose(prob.sum(), 1.0):
                    raise ConfigurationError('Action distribution of state {} is not valid.'.format(s))
    return policy


def random_policy(model, random_state=None):
    #--------------------------------------------------------------------------
    # Uniformly random stationary deterministic policy
    #--------------------------------------------------------------------------
    rng = np.random.default_rng(random_state)
    return StationaryDeterministic([rng.integers(model.action_count(s)) for s in model.states()])


def make_value(model, objective):
    #--------------------------------------------------------------------------
    # Allocate value and policy storage for the in-place solvers
    #--------------------------------------------------------------------------
    objective   = as_objective(objective)
    num_state   = model.state_count()
    if isinstance(objective, FiniteHorizon):
        T = objective.horizon
        return np.zeros((T + 1, num_state)), np.zeros((T, num_state), dtype=np.int64)
    return np.zeros(num_state), np.zeros(num_state, dtype=np.int64)
