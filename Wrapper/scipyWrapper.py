# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import numpy as np
from numpy import asarray
from scipy.optimize import linprog
from scipy.sparse import csr_matrix, vstack
from Wrapper.linProgWrapper import lin_prog_wrapper


class linprog_LP_wrapper(lin_prog_wrapper):
    #-------------------------------------------------------------------------------
    # scipy.optimize.linprog (HiGHS) wrapper implementation. Components are
    # collected and the LP is handed to linprog in one call.
    #-------------------------------------------------------------------------------

    def __init__(self, solver_conf):
        #-------------------------------------------------------------------------------
        # Initialization
        #-------------------------------------------------------------------------------
        super().__init__(solver_conf)
        self.method             = self.solver_conf['lp_method']
        self.options            = {
                'disp'                          :   bool(self.solver_conf['verbose']),
                'primal_feasibility_tolerance'  :   self.solver_conf['feasibility_tol'],
                'dual_feasibility_tolerance'    :   self.solver_conf['optimality_tol'],
        }
        self.num_var            = 0
        self.bounds             = None
        self.constr_blocks      = []
        self.RHS_blocks         = []
        self.obj_coef           = None
        self.is_maximum         = False
        self.constr_matrix      = None
        self.RHS                = None
        self.result             = None

    def set_up_variables(self, num_var, lb=None, ub=None):
        #-------------------------------------------------------------------------------
        # Variable bounds; infinite bounds mean free
        #-------------------------------------------------------------------------------
        lb              = np.full(num_var, -np.inf) if lb is None else asarray(lb, dtype=float)
        ub              = np.full(num_var,  np.inf) if ub is None else asarray(ub, dtype=float)
        self.num_var    = num_var
        self.bounds     = [(None if np.isinf(l) else l, None if np.isinf(u) else u) for l, u in zip(lb, ub)]

    def add_constraints(self, constr_matrix, RHS):
        self.constr_blocks.append(csr_matrix(constr_matrix))
        self.RHS_blocks.append(asarray(RHS, dtype=float))

    def set_objective(self, obj_coef, is_maximum=True):
        self.obj_coef   = asarray(obj_coef, dtype=float)
        self.is_maximum = is_maximum

    def prepare(self):
        #-------------------------------------------------------------------------------
        # Stack the constraint blocks
        #-------------------------------------------------------------------------------
        if len(self.constr_blocks) > 0:
            self.constr_matrix  = vstack(self.constr_blocks).tocsr()
            self.RHS            = np.concatenate(self.RHS_blocks)

    def optimize(self):
        #-------------------------------------------------------------------------------
        # linprog minimizes; a maximization is solved on the negated objective
        #-------------------------------------------------------------------------------
        obj_coef        = -self.obj_coef if self.is_maximum else self.obj_coef
        self.result     = linprog(obj_coef,
                                  A_ub      = self.constr_matrix,
                                  b_ub      = self.RHS,
                                  bounds    = self.bounds,
                                  method    = self.method,
                                  options   = self.options)

    def get_num_var_constr(self):
        return self.num_var, 0 if self.constr_matrix is None else self.constr_matrix.shape[0]

    def get_optimal_value(self):
        return -self.result.fun if self.is_maximum else self.result.fun

    def get_optimal_solution(self):
        return asarray(self.result.x)

    def get_dual_solution(self):
        #-------------------------------------------------------------------------------
        # Marginals of the inequality constraints, in the order they were added
        #-------------------------------------------------------------------------------
        if self.constr_matrix is None:
            return np.zeros(0)
        marginals = asarray(self.result.ineqlin.marginals, dtype=float)
        return -marginals if self.is_maximum else marginals

    def get_status(self):
        #-------------------------------------------------------------------------------
        # Map linprog status codes to the wrapper statuses
        #-------------------------------------------------------------------------------
        status = self.result.status

        if status == 0:
            return "OPTIMAL"
        elif status == 2:
            return "INFEASIBLE"
        elif status == 3:
            return "UNBOUNDED"
        else:
            return "UNKNOWN"

    def get_message(self):
        return self.result.message
