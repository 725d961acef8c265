# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import warnings
from collections import namedtuple
import numpy as np
from scipy.sparse import identity
from scipy.sparse.linalg import spsolve
from Algorithm.bellman import greedy_inplace
from Algorithm.mrp import mrp, mrp_sparse
from MDP.objective import InfiniteHorizon, as_objective
from MDP.policy import StationaryDeterministic, as_policy, validate_policy
from utils import ConfigurationError, NonConvergence, merge_solver_conf, solver_output_handler


PolicyIterationResult = namedtuple('PolicyIterationResult',
                                   ['value', 'policy', 'iterations', 'converged', 'trace'])


def evaluate_policy(model, objective, policy, sparse=False):
    #--------------------------------------------------------------------------
    # Solve (I - discount*P_pi) v = r_pi with a dense or a sparse direct
    # solver
    #--------------------------------------------------------------------------
    num_state   = model.state_count()
    discount    = objective.discount
    if sparse:
        P, r    = mrp_sparse(model, policy)
        A       = (identity(num_state, format='csr') - discount*P).tocsc()
        return np.atleast_1d(spsolve(A, r))
    P, r        = mrp(model, policy)
    return np.linalg.solve(np.eye(num_state) - discount*P, r)


def _initial_policy(model, initial_policy):
    if initial_policy is None:
        return StationaryDeterministic(np.zeros(model.state_count(), dtype=np.int64))
    policy = validate_policy(model, as_policy(initial_policy))
    if not (policy.is_stationary and policy.is_deterministic):
        raise ConfigurationError('Policy iteration starts from a stationary deterministic policy.')
    return StationaryDeterministic(policy.actions.copy())


def _policy_iteration(model, objective, initial_policy, solver_conf, sparse):
    #--------------------------------------------------------------------------
    # Alternate evaluation and greedy improvement until the policy is stable.
    # The returned value belongs to the last evaluated policy; the returned
    # policy is greedy for it, and equal to it on convergence.
    #--------------------------------------------------------------------------
    objective       = as_objective(objective)
    solver_conf     = merge_solver_conf(solver_conf)
    if not isinstance(objective, InfiniteHorizon):
        raise ConfigurationError('Policy iteration supports only the infinite-horizon discounted objective.')

    algo_name       = 'Sparse policy iteration' if sparse else 'Policy iteration'
    output_handler  = solver_output_handler(algo_name, ['iteration', 'changed_actions'], solver_conf)
    output_handler.print_algorithm_instance_info(model, objective)

    policy          = _initial_policy(model, initial_policy)
    new_actions     = np.zeros(model.state_count(), dtype=np.int64)
    value           = None
    iterations      = 0
    converged       = False

    for iterations in range(1, solver_conf['iterations'] + 1):
        value           = evaluate_policy(model, objective, policy, sparse)
        greedy_inplace(new_actions, model, objective, value)
        changed_actions = int(np.count_nonzero(new_actions != policy.actions))
        output_handler.append_to_outputs(iterations, changed_actions)
        policy          = StationaryDeterministic(new_actions.copy())
        if changed_actions == 0:
            converged = True
            break

    output_handler.close(converged)
    if not converged:
        warnings.warn('Policy iteration stopped after {} iterations without a stable policy.'.format(iterations),
                      NonConvergence)

    return PolicyIterationResult(value       = value,
                                 policy      = policy,
                                 iterations  = iterations,
                                 converged   = converged,
                                 trace       = output_handler.get_output_table())


def policy_iteration(model, objective, initial_policy=None, solver_conf=None):
    """
    Policy iteration with dense linear algebra. `objective` is an
    InfiniteHorizon objective or a bare discount factor. The iteration cap
    is solver_conf['iterations']; reaching it issues a NonConvergence
    warning. Transitions must not repeat a next state within an action.
    """
    return _policy_iteration(model, objective, initial_policy, solver_conf, sparse=False)


def policy_iteration_sparse(model, objective, initial_policy=None, solver_conf=None):
    """
    Policy iteration that evaluates policies with a sparse direct solver.
    """
    return _policy_iteration(model, objective, initial_policy, solver_conf, sparse=True)
