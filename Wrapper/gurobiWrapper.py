# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import gurobipy as gb
from gurobipy import GRB
import numpy as np
from numpy import asarray
from Wrapper.linProgWrapper import lin_prog_wrapper


class gurobi_LP_wrapper(lin_prog_wrapper):
    #-------------------------------------------------------------------------------
    # Gurobi wrapper implementation
    #-------------------------------------------------------------------------------

    def __init__(self, solver_conf):
        #-------------------------------------------------------------------------------
        # Initialization
        #-------------------------------------------------------------------------------
        super().__init__(solver_conf)
        self.LP             = gb.Model()
        self.num_cpu_core   = self.solver_conf['num_cpu_core']
        self.LP.setParam('OutputFlag',      bool(self.solver_conf['verbose']))
        self.LP.setParam('Threads',         self.num_cpu_core)
        self.LP.setParam('Seed',            self.solver_conf['seed'])
        self.LP.setParam('FeasibilityTol',  max(1e-9, self.solver_conf['feasibility_tol']))
        self.LP.setParam('OptimalityTol',   max(1e-9, self.solver_conf['optimality_tol']))
        self.LP.setParam('DualReductions',  0)
        self.LP_var         = None

    def prepare(self):
        #-------------------------------------------------------------------------------
        # Prepare Gurobi model before being solved
        #-------------------------------------------------------------------------------
        self.LP.update()

    def optimize(self):
        #-------------------------------------------------------------------------------
        # Optimize Gurobi model
        #-------------------------------------------------------------------------------
        self.LP.optimize()

    def get_num_var_constr(self):
        #-------------------------------------------------------------------------------
        # Get # of variables and constraints of a model
        #-------------------------------------------------------------------------------
        return self.LP.NumVars, self.LP.NumConstrs

    def set_up_variables(self, num_var, lb=None, ub=None):
        #-------------------------------------------------------------------------------
        # Set up variables of Gurobi model; infinite bounds mean free
        #-------------------------------------------------------------------------------
        lb = np.full(num_var, -np.inf) if lb is None else asarray(lb, dtype=float)
        ub = np.full(num_var,  np.inf) if ub is None else asarray(ub, dtype=float)
        self.LP_var = self.LP.addMVar(
                               shape  = num_var,
                               lb     = np.where(np.isinf(lb), -GRB.INFINITY, lb),
                               ub     = np.where(np.isinf(ub),  GRB.INFINITY, ub),
                               vtype  = GRB.CONTINUOUS)
        self.LP.update()

    def add_constraints(self, constr_matrix, RHS):
        #-------------------------------------------------------------------------------
        # Add constraints  constr_matrix @ x <= RHS; the matrix may be sparse
        #-------------------------------------------------------------------------------
        self.LP.addMConstr(constr_matrix, self.LP_var, '<', asarray(RHS, dtype=float))
        self.LP.update()

    def set_objective(self, obj_coef, is_maximum=True):
        #-------------------------------------------------------------------------------
        # Set the objective function of Gurobi model
        #-------------------------------------------------------------------------------
        obj_coef = asarray(obj_coef, dtype=float)
        if is_maximum:
            self.LP.setObjective(obj_coef @ self.LP_var, GRB.MAXIMIZE)
        else:
            self.LP.setObjective(obj_coef @ self.LP_var, GRB.MINIMIZE)

    def get_optimal_value(self):
        #-------------------------------------------------------------------------------
        # Get optimal objective value of Gurobi model
        #-------------------------------------------------------------------------------
        return self.LP.objVal

    def get_optimal_solution(self):
        #-------------------------------------------------------------------------------
        # Get optimal solution of Gurobi model
        #-------------------------------------------------------------------------------
        return asarray(self.LP_var.X)

    def get_dual_solution(self):
        #-------------------------------------------------------------------------------
        # Get dual values of the constraints, in the order they were added
        #-------------------------------------------------------------------------------
        return asarray(self.LP.getAttr('Pi', self.LP.getConstrs()), dtype=float)

    def get_status(self):
        #-------------------------------------------------------------------------------
        # Get Gurobi status after optimization
        #-------------------------------------------------------------------------------
        status = self.LP.status

        if status == GRB.INF_OR_UNBD:
            return "INF_OR_UNBD"
        elif status == GRB.UNBOUNDED:
            return "UNBOUNDED"
        elif status == GRB.INFEASIBLE:
            return "INFEASIBLE"
        elif status == GRB.OPTIMAL:
            return "OPTIMAL"
        else:
            return "UNKNOWN"
