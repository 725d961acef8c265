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
from numpy.testing import assert_allclose, assert_array_equal
from Algorithm.policyIteration import evaluate_policy, policy_iteration
from LP.LPMaker import make_transience_LP, make_value_LP
from LP.LPSolver import all_transient, any_transient, lp_solve, recover_policy
from MDP.objective import FiniteHorizon, InfiniteHorizon, TotalReward
from MDP.policy import validate_policy
from utils import ConfigurationError, SolverError
from Wrapper.scipyWrapper import linprog_LP_wrapper


class counting_LP_wrapper(linprog_LP_wrapper):
    num_solved = 0

    def optimize(self):
        counting_LP_wrapper.num_solved += 1
        super().optimize()


def test_value_LP_components(chain_int):
    components = make_value_LP(chain_int, InfiniteHorizon(0.9))
    assert components.constr_matrix.shape == (6, 3)
    assert_array_equal(components.row_offsets, [0, 2, 4, 6])
    assert_array_equal(components.row_action, [0, 1, 0, 1, 0, 1])
    # stay in state 0:  -v(0) + 0.9 v(0) <= -10
    assert_allclose(components.constr_matrix.toarray()[0], [-0.1, 0.0, 0.0])
    assert_allclose(components.RHS[:2], [-10.0, -10.0])


def test_total_reward_LP_fixes_terminal_states(gamblers_ruin):
    components = make_value_LP(gamblers_ruin, TotalReward())
    assert_allclose(components.lb[[0, 4]], [0.0, 0.0])
    assert_allclose(components.ub[[0, 4]], [0.0, 0.0])
    assert components.row_offsets[1] == 0
    assert components.constr_matrix.shape[0] == 1 + 2 + 1


def test_transience_LP_signs(gamblers_ruin):
    some    = make_transience_LP(gamblers_ruin, all_policies=False)
    every   = make_transience_LP(gamblers_ruin, all_policies=True)
    assert_allclose(some.constr_matrix.toarray(), -every.constr_matrix.toarray())
    assert_allclose(some.RHS, np.ones(4))
    assert_allclose(every.RHS, -np.ones(4))


def test_discounted_LP_agrees_with_policy_iteration(chain):
    solution    = lp_solve(chain, InfiniteHorizon(0.9))
    pi_result   = policy_iteration(chain, InfiniteHorizon(0.9))
    assert_allclose(solution.value, pi_result.value, atol=1e-6)
    assert solution.objective_value == pytest.approx(188.1, abs=1e-5)
    assert_array_equal(solution.policy.actions[:2], [0, 1])
    assert_allclose(evaluate_policy(chain, InfiniteHorizon(0.9), solution.policy), solution.value, atol=1e-6)


def test_total_reward_LP(gamblers_ruin):
    assert all_transient(gamblers_ruin)
    solution = lp_solve(gamblers_ruin, TotalReward())
    assert_allclose(solution.value, [0.0, 0.25, 0.5, 0.75, 0.0], atol=1e-7)
    validate_policy(gamblers_ruin, solution.policy)


def test_transience_with_noop(gamblers_ruin_noop):
    assert any_transient(gamblers_ruin_noop)
    assert not all_transient(gamblers_ruin_noop)


def test_no_transient_policy(trapped_mdp):
    assert not any_transient(trapped_mdp)
    assert not all_transient(trapped_mdp)


def test_solver_error_is_surfaced(trapped_mdp):
    with pytest.raises(SolverError) as error:
        lp_solve(trapped_mdp, TotalReward())
    assert error.value.status != 'OPTIMAL'


class annotated_LP_wrapper(linprog_LP_wrapper):

    def get_message(self):
        return 'no feasible basis'


def test_solver_error_carries_backend_message(trapped_mdp):
    with pytest.raises(SolverError) as error:
        lp_solve(trapped_mdp, TotalReward(), backend=annotated_LP_wrapper)
    assert error.value.message == 'no feasible basis'
    assert error.value.status in str(error.value)
    assert str(error.value).endswith('no feasible basis')


def test_finite_horizon_is_refused(chain):
    with pytest.raises(ConfigurationError):
        lp_solve(chain, FiniteHorizon(0.9, 3))


def test_backend_selection(chain_int):
    counting_LP_wrapper.num_solved = 0
    lp_solve(chain_int, 0.9, backend=counting_LP_wrapper)
    assert counting_LP_wrapper.num_solved == 1
    any_transient(chain_int, solver_conf={'solver_name': counting_LP_wrapper})
    assert counting_LP_wrapper.num_solved == 2


def test_recover_policy_prefers_lowest_binding_action(chain_int):
    components  = make_value_LP(chain_int, InfiniteHorizon(0.9))
    value       = np.array([100.0, 88.1, 0.0])
    policy      = recover_policy(components, value, None, 1e-7)
    assert_array_equal(policy.actions, [0, 1, 0])
    duals       = np.array([1.0, 0.0, 0.0, 1.0, 0.0, 1.0])
    policy      = recover_policy(components, value, duals, 1e-7)
    assert_array_equal(policy.actions, [0, 1, 1])


def test_verbose_LP(chain_int, capsys):
    lp_solve(chain_int, 0.9, solver_conf={'verbose': True})
    assert 'LP with 3 variables and 6 constraints' in capsys.readouterr().out


def test_gurobi_backend(chain_int, gamblers_ruin_noop):
    pytest.importorskip('gurobipy')
    from Wrapper.gurobiWrapper import gurobi_LP_wrapper
    solution = lp_solve(chain_int, InfiniteHorizon(0.9), backend=gurobi_LP_wrapper)
    assert_allclose(solution.value, [100.0, 88.1, 0.0], atol=1e-6)
    assert any_transient(gamblers_ruin_noop, backend=gurobi_LP_wrapper)
    assert not all_transient(gamblers_ruin_noop, solver_conf={'solver_name': gurobi_LP_wrapper})
