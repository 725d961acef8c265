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
from LP.LPMaker import make_transience_LP, make_value_LP
from MDP.objective import FiniteHorizon, InfiniteHorizon, TotalReward, as_objective
from MDP.policy import StationaryDeterministic
from utils import ConfigurationError, SolverError, make_text_bold, merge_solver_conf
from Wrapper.scipyWrapper import linprog_LP_wrapper


LPSolution = namedtuple('LPSolution', ['value', 'policy', 'objective_value'])


def get_LP_solver(solver_conf, backend=None):
    #--------------------------------------------------------------------------
    # Instantiate the LP backend: an explicit wrapper class, else the one in
    # the configuration, else scipy's linprog
    #--------------------------------------------------------------------------
    if backend is None:
        backend = solver_conf['solver_name']
    if backend is None:
        backend = linprog_LP_wrapper
    if not callable(backend):
        raise ConfigurationError('LP backend must be a wrapper class, got ' + str(backend))
    return backend(solver_conf)


def solve_LP(LP_solver, components, is_maximum, solver_conf):
    #--------------------------------------------------------------------------
    # Load the components into the backend, optimize, and return the status
    #--------------------------------------------------------------------------
    num_var = len(components.lb)
    LP_solver.set_up_variables(num_var, components.lb, components.ub)
    if components.constr_matrix.shape[0] > 0:
        LP_solver.add_constraints(components.constr_matrix, components.RHS)
    LP_solver.set_objective(np.ones(num_var), is_maximum)
    LP_solver.prepare()

    if solver_conf['verbose']:
        num_var, num_constr = LP_solver.get_num_var_constr()
        print(make_text_bold('LP with {} variables and {} constraints'.format(num_var, num_constr)))

    LP_solver.optimize()
    return LP_solver.get_status()


def any_transient(model, backend=None, solver_conf=None):
    """
    True iff some stationary policy reaches a terminal state in finite
    expected time from every state.
    """
    solver_conf = merge_solver_conf(solver_conf)
    LP_solver   = get_LP_solver(solver_conf, backend)
    status      = solve_LP(LP_solver, make_transience_LP(model, all_policies=False), True, solver_conf)
    return status == 'OPTIMAL'


def all_transient(model, backend=None, solver_conf=None):
    """
    True iff every stationary policy reaches a terminal state in finite
    expected time from every state.
    """
    solver_conf = merge_solver_conf(solver_conf)
    LP_solver   = get_LP_solver(solver_conf, backend)
    status      = solve_LP(LP_solver, make_transience_LP(model, all_policies=True), False, solver_conf)
    return status == 'OPTIMAL'


def recover_policy(components, value, duals, binding_tol):
    #--------------------------------------------------------------------------
    # Pick, for every state, an action whose constraint is binding at the
    # optimal value. Binding rows with a positive dual take precedence; ties
    # go to the lowest action index. States without rows (terminal) get
    # action 0.
    #--------------------------------------------------------------------------
    num_state   = len(components.lb)
    actions     = np.zeros(num_state, dtype=np.int64)
    if components.constr_matrix.shape[0] == 0:
        return StationaryDeterministic(actions)

    slack       = components.RHS - components.constr_matrix @ value
    has_dual    = np.abs(duals) > binding_tol if duals is not None and len(duals) == len(slack) \
                  else np.zeros(len(slack), dtype=bool)

    for s in range(num_state):
        i, j = components.row_offsets[s], components.row_offsets[s + 1]
        if i == j:
            continue
        tol         = binding_tol*max(1.0, abs(value[s]))
        binding     = slack[i:j] <= tol
        preferred   = binding & has_dual[i:j]
        if np.any(preferred):
            k = np.flatnonzero(preferred)[0]
        elif np.any(binding):
            k = np.flatnonzero(binding)[0]
        else:
            k = int(np.argmin(slack[i:j]))
        actions[s] = components.row_action[i + k]

    return StationaryDeterministic(actions)


def lp_solve(model, objective, backend=None, solver_conf=None):
    """
    Optimal value and policy of a tabular MDP from the primal LP

        min  sum_s v(s)
        s.t. v(s) >= r(s,a) + discount*sum_s' P(s,a,s')v(s')   for all (s,a).

    `objective` is TotalReward (discount one, terminal values fixed at zero)
    or InfiniteHorizon. Transience is not checked; call any_transient or
    all_transient first for the total reward objective. A backend status
    other than OPTIMAL raises SolverError carrying that status.
    """
    objective   = as_objective(objective)
    solver_conf = merge_solver_conf(solver_conf)
    if isinstance(objective, FiniteHorizon):
        raise ConfigurationError('The LP solve does not support the finite-horizon objective; use value iteration.')
    if not isinstance(objective, (TotalReward, InfiniteHorizon)):
        raise ConfigurationError('Objective of type (' + type(objective).__name__ + ') is not implemented!')

    components  = make_value_LP(model, objective)
    LP_solver   = get_LP_solver(solver_conf, backend)
    status      = solve_LP(LP_solver, components, False, solver_conf)
    if status != 'OPTIMAL':
        raise SolverError(status, LP_solver.get_message())

    value       = np.asarray(LP_solver.get_optimal_solution(), dtype=float)
    duals       = LP_solver.get_dual_solution()
    policy      = recover_policy(components, value, duals, solver_conf['binding_tol'])
    return LPSolution(value             = value,
                      policy            = policy,
                      objective_value   = float(LP_solver.get_optimal_value()))
