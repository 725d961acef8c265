# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
from numbers import Integral, Real
from utils import ConfigurationError


class Objective:
    #--------------------------------------------------------------------------
    # Base of the three objectives. The objective fixes the discount, the
    # horizon, and the class of policies that solve it.
    #--------------------------------------------------------------------------
    discount: float         = 1.0
    horizon                 = None
    is_stationary: bool     = True
    is_deterministic: bool  = True


def _check_discount(discount, upper_inclusive):
    if isinstance(discount, bool) or not isinstance(discount, Real):
        raise ConfigurationError('Discount factor must be a real number.')
    if discount < 0 or discount > 1 or (not upper_inclusive and discount == 1):
        bound = '[0,1]' if upper_inclusive else '[0,1)'
        raise ConfigurationError('Discount factor {} is not in {}.'.format(discount, bound))
    return float(discount)


class FiniteHorizon(Objective):
    """
    Finite-horizon discounted objective. Decisions are taken at times 1..T
    and the terminal value applies at time T+1. Solved by a deterministic
    Markov (time-dependent) policy.
    """
    is_stationary           = False

    def __init__(self, discount, horizon):
        self.discount       = _check_discount(discount, upper_inclusive=True)
        if isinstance(horizon, bool) or not isinstance(horizon, Integral) or horizon <= 0:
            raise ConfigurationError('Horizon must be a positive integer, got {}.'.format(horizon))
        self.horizon        = int(horizon)

    def __repr__(self):
        return 'FiniteHorizon(discount={}, horizon={})'.format(self.discount, self.horizon)


class InfiniteHorizon(Objective):
    """
    Infinite-horizon discounted objective, solved by a stationary
    deterministic policy. The discount must be strictly below one.
    """

    def __init__(self, discount):
        self.discount       = _check_discount(discount, upper_inclusive=False)

    def __repr__(self):
        return 'InfiniteHorizon(discount={})'.format(self.discount)


class TotalReward(Objective):
    """
    Undiscounted total reward. Well posed only for transient models, see
    LP.LPSolver.any_transient and all_transient.
    """

    def __repr__(self):
        return 'TotalReward()'


def as_objective(objective):
    #--------------------------------------------------------------------------
    # A bare discount factor stands for the infinite-horizon objective
    #--------------------------------------------------------------------------
    if isinstance(objective, Objective):
        return objective
    if isinstance(objective, Real) and not isinstance(objective, bool):
        return InfiniteHorizon(objective)
    raise ConfigurationError('Objective of type (' + type(objective).__name__ + ') is not implemented!')


def horizon(objective):
    return as_objective(objective).horizon
