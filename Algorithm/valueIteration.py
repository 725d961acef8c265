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
from multiprocessing.pool import ThreadPool
import numpy as np
from tqdm import tqdm
from Algorithm.bellman import bellman_sweep, policy_sweep
from MDP.intMDP import IntMDP
from MDP.objective import FiniteHorizon, InfiniteHorizon, TotalReward, as_objective
from MDP.policy import MarkovDeterministic, StationaryDeterministic, as_policy, make_value, validate_policy
from utils import ConfigurationError, NonConvergence, merge_solver_conf, solver_output_handler, span_seminorm, sup_norm


ValueIterationResult = namedtuple('ValueIterationResult',
                                  ['value', 'policy', 'iterations', 'residual', 'converged', 'trace'])


def get_terminal_value(model, v_terminal=None):
    #--------------------------------------------------------------------------
    # Value at time T+1: zero, an array over states, or a function of the
    # state id
    #--------------------------------------------------------------------------
    num_state = model.state_count()
    if v_terminal is None:
        return np.zeros(num_state)
    if callable(v_terminal):
        return np.asarray([v_terminal(s) for s in range(num_state)], dtype=float)
    v_terminal = np.asarray(v_terminal, dtype=float)
    if v_terminal.shape != (num_state,):
        raise ConfigurationError('Terminal value has shape {}, model has {} states.'.format(v_terminal.shape, num_state))
    return v_terminal


def _backward_induction(v, pi, model, objective, policy, v_terminal, solver_conf):
    #--------------------------------------------------------------------------
    # Fill v[t] for t = T-1,...,0 from v[t+1]; row t holds the value at time
    # t+1 and pi[t] the decision taken then
    #--------------------------------------------------------------------------
    T                       = objective.horizon
    output_handler          = solver_output_handler('Finite-horizon value iteration', ['stage', 'value_norm'], solver_conf)
    output_handler.print_algorithm_instance_info(model, objective)

    v[T] = get_terminal_value(model, v_terminal)
    for t in tqdm(range(T - 1, -1, -1), ncols=solver_conf['print_len'], leave=True,
                  desc='Backward induction', disable=not solver_conf['verbose']):
        if policy is None:
            bellman_sweep(model, objective, t, v[t + 1], v[t], pi[t])
        else:
            stage_policy = policy if policy.is_stationary else policy[t]
            policy_sweep(model, objective, t, v[t + 1], stage_policy, v[t])
        output_handler.append_to_outputs(t, sup_norm(v[t]))

    output_handler.close(True)
    return output_handler.get_output_table()


def value_iteration_inplace(v, pi, model, objective, policy=None, v_terminal=None, solver_conf=None):
    """
    Finite-horizon value iteration into caller-owned storage, e.g. the
    buffers of MDP.policy.make_value. v has shape (T+1, N) and pi shape
    (T, N); both belong to the calling thread until the call returns. When
    `policy` is given it is evaluated and pi may be None.
    """
    objective       = as_objective(objective)
    solver_conf     = merge_solver_conf(solver_conf)
    if not isinstance(objective, FiniteHorizon):
        raise ConfigurationError('In-place value iteration supports only the finite-horizon objective.')

    T, num_state    = objective.horizon, model.state_count()
    if not isinstance(v, np.ndarray) or v.shape != (T + 1, num_state):
        raise ConfigurationError('Value buffer must be an array of shape ({}, {}).'.format(T + 1, num_state))
    if policy is None:
        if not isinstance(pi, np.ndarray) or pi.shape != (T, num_state):
            raise ConfigurationError('Policy buffer must be an array of shape ({}, {}).'.format(T, num_state))
    else:
        policy = validate_policy(model, as_policy(policy), T)

    _backward_induction(v, pi, model, objective, policy, v_terminal, solver_conf)
    return v, pi


def _infinite_horizon(model, objective, policy, solver_conf):
    #--------------------------------------------------------------------------
    # Jacobi value iteration: every sweep reads only the previous iterate.
    # Stops when the residual is below epsilon*(1-discount)/discount, which
    # puts the iterate within epsilon*discount/(1-discount) of the fixed
    # point in the sup-norm.
    #--------------------------------------------------------------------------
    num_state               = model.state_count()
    discount                = objective.discount
    threshold               = solver_conf['epsilon']*(1 - discount)/discount if discount > 0 else np.inf
    norm                    = sup_norm if solver_conf['stop_rule'] == 'supnorm' else span_seminorm
    num_cpu_core            = solver_conf['num_cpu_core']
    parallel                = solver_conf['parallel']
    output_handler          = solver_output_handler('Value iteration', ['iteration', 'residual'], solver_conf)
    output_handler.print_algorithm_instance_info(model, objective)

    v                       = np.zeros(num_state)
    v_next                  = np.zeros(num_state)
    actions                 = np.zeros(num_state, dtype=np.int64)
    residual                = np.inf
    iterations              = 0
    converged               = False

    #--------------------------------------------------------------------------
    # Compiled kernels of IntMDP run their own threads; a thread pool is only
    # needed for generic models or policy evaluation
    pool = None
    if parallel and (policy is not None or not isinstance(model, IntMDP)):
        pool = ThreadPool(num_cpu_core)

    try:
        for iterations in range(1, solver_conf['iterations'] + 1):
            if policy is None:
                bellman_sweep(model, objective, 0, v, v_next, actions, pool, num_cpu_core, parallel)
            else:
                policy_sweep(model, objective, 0, v, policy, v_next, pool, num_cpu_core)
            residual    = norm(v_next - v)
            v, v_next   = v_next, v
            output_handler.append_to_outputs(iterations, residual)
            if residual <= threshold:
                converged = True
                break

        if policy is None:
            bellman_sweep(model, objective, 0, v, v_next, actions, pool, num_cpu_core, parallel)
    finally:
        if pool is not None:
            pool.close()
            pool.join()

    output_handler.close(converged)
    if not converged:
        warnings.warn('Value iteration stopped after {} iterations with residual {:.3e} > {:.3e}.'.format(
                      iterations, residual, threshold), NonConvergence)

    return ValueIterationResult(value        = v,
                                policy       = StationaryDeterministic(actions) if policy is None else None,
                                iterations   = iterations,
                                residual     = residual,
                                converged    = converged,
                                trace        = output_handler.get_output_table())


def value_iteration(model, objective, policy=None, v_terminal=None, solver_conf=None):
    """
    Compute the value function and a greedy policy of a tabular MDP.

    Finite horizon: backward induction over times T,...,1 starting from
    v_terminal (zero by default) at time T+1. The value has shape (T+1, N)
    and row t belongs to time t+1; the policy is Markov with row t the
    decision at time t+1.

    Infinite horizon: synchronous (Jacobi) iteration until the residual
    drops below epsilon*(1-discount)/discount, or until the iteration cap.
    Reaching the cap is not an error: a NonConvergence warning is issued and
    the last iterate is returned with converged=False. With
    solver_conf['parallel'] the sweep over states runs on several threads.

    If `policy` is given, it is evaluated instead of optimized and the
    returned policy is None.
    """
    objective   = as_objective(objective)
    solver_conf = merge_solver_conf(solver_conf)

    if isinstance(objective, FiniteHorizon):
        v, pi = make_value(model, objective)
        if policy is not None:
            policy = validate_policy(model, as_policy(policy), objective.horizon)
        trace = _backward_induction(v, pi, model, objective, policy, v_terminal, solver_conf)
        return ValueIterationResult(value       = v,
                                    policy      = MarkovDeterministic(pi) if policy is None else None,
                                    iterations  = objective.horizon,
                                    residual    = None,
                                    converged   = True,
                                    trace       = trace)

    elif isinstance(objective, InfiniteHorizon):
        if v_terminal is not None:
            raise ConfigurationError('A terminal value applies only to the finite-horizon objective.')
        if policy is not None:
            policy = validate_policy(model, as_policy(policy))
            if not policy.is_stationary:
                raise ConfigurationError('The infinite-horizon objective evaluates only stationary policies.')
        return _infinite_horizon(model, objective, policy, solver_conf)

    elif isinstance(objective, TotalReward):
        raise ConfigurationError('Value iteration does not support the total reward objective; use LP.LPSolver.lp_solve.')

    else:
        raise ConfigurationError('Objective of type (' + type(objective).__name__ + ') is not implemented!')
