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
from numpy.testing import assert_allclose
from Algorithm.mrp import mrp, mrp_inplace, mrp_sparse
from MDP.intMDP import make_int_mdp
from MDP.policy import MarkovDeterministic, StationaryRandomized
from utils import ConfigurationError, StructuralError


def test_mrp_of_deterministic_policy(chain):
    P, r = mrp(chain, [0, 1, 0])
    assert_allclose(P, [[1.0, 0.0, 0.0], [0.99, 0.0, 0.01], [0.0, 0.0, 1.0]])
    assert_allclose(r, [10.0, -1.0, 0.0])


def test_mrp_rows_are_distributions(gamblers_ruin):
    P, r = mrp(gamblers_ruin, [0, 0, 1, 0, 0])
    assert_allclose(P.sum(axis=1), np.ones(5))
    # bet 2 from capital 2 reaches 4 with probability one half
    assert r[2] == pytest.approx(0.5)


def test_mrp_of_randomized_policy(chain):
    P, r = mrp(chain, StationaryRandomized([[0.5, 0.5], [1.0, 0.0], [0.0, 1.0]]))
    assert_allclose(P[0], [0.5, 0.5, 0.0])
    assert_allclose(P[2], [0.0, 0.0, 1.0])
    assert r[0] == pytest.approx(10.0)


def test_sparse_mrp_matches_dense(chain):
    P, r                = mrp(chain, [1, 1, 0])
    P_sparse, r_sparse  = mrp_sparse(chain, [1, 1, 0])
    assert_allclose(P_sparse.toarray(), P)
    assert_allclose(r_sparse, r)


def test_mrp_inplace_overwrites_buffers(chain):
    P = np.full((3, 3), 7.0)
    r = np.full(3, 7.0)
    mrp_inplace(P, r, chain, [0, 0, 0])
    assert_allclose(P, np.eye(3))
    assert_allclose(r, [10.0, -1.0, 0.0])
    with pytest.raises(ConfigurationError):
        mrp_inplace(np.zeros((2, 2)), np.zeros(2), chain, [0, 0, 0])


def test_mrp_rejects_duplicate_transitions(duplicate_mdp):
    with pytest.raises(StructuralError):
        mrp(duplicate_mdp, [0, 0])
    with pytest.raises(StructuralError):
        mrp_sparse(make_int_mdp(duplicate_mdp), [0, 0])


def test_mrp_inplace_failure_leaves_buffers_untouched(late_duplicate_mdp):
    P = np.full((3, 3), 7.0)
    r = np.full(3, 7.0)
    with pytest.raises(StructuralError):
        mrp_inplace(P, r, late_duplicate_mdp, [0, 0, 0])
    assert_allclose(P, np.full((3, 3), 7.0))
    assert_allclose(r, np.full(3, 7.0))


def test_mrp_after_compression(duplicate_mdp):
    P, r = mrp(make_int_mdp(duplicate_mdp, docompress=True), [0, 0])
    assert_allclose(P, [[0.0, 1.0], [0.0, 1.0]])
    assert_allclose(r, [1.0, 0.0])


def test_mrp_rejects_markov_policy(chain):
    with pytest.raises(ConfigurationError):
        mrp(chain, MarkovDeterministic([[0, 0, 0], [1, 1, 1]]))
