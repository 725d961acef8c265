# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/homepage/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""

"""
    Interface of a linear programming backend. A wrapper holds one LP:
    variables with bounds, constraints  matrix @ x <= RHS, and a linear
    objective. The status after optimize() is one of OPTIMAL, INFEASIBLE,
    UNBOUNDED, INF_OR_UNBD, UNKNOWN.
"""
class lin_prog_wrapper:

    def __init__(self, solver_conf):
        self.solver_conf = solver_conf

    def set_up_variables(self, num_var, lb=None, ub=None):
        pass

    def add_constraints(self, constr_matrix, RHS):
        pass

    def set_objective(self, obj_coef, is_maximum=True):
        pass

    def prepare(self):
        pass

    def optimize(self):
        pass

    def get_num_var_constr(self):
        pass

    def get_optimal_value(self):
        pass

    def get_optimal_solution(self):
        pass

    def get_dual_solution(self):
        pass

    def get_status(self):
        pass

    def get_message(self):
        pass
