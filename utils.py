# -*- coding: utf-8 -*-
"""
-------------------------------------------------------------------------------

    Authors:    Parshan Pakiman  | https://parshanpakiman.github.io/
                Selva Nadarajah  | https://selvan.people.uic.edu/

    Licensing Information: The MIT License
-------------------------------------------------------------------------------
"""
import os
import time
import numpy as np
import pandas as pd


class ConfigurationError(ValueError):
    #--------------------------------------------------------------------------
    # Malformed objective, policy, buffer, or solver configuration
    #--------------------------------------------------------------------------
    pass


class StructuralError(ValueError):
    #--------------------------------------------------------------------------
    # Transition structure that the requested operation cannot accept, e.g.
    # duplicated (s,a,s') entries where aggregation is required
    #--------------------------------------------------------------------------
    pass


class EmptyActionSetError(ValueError):
    #--------------------------------------------------------------------------
    # A state reports zero valid actions
    #--------------------------------------------------------------------------
    pass


class NonConvergence(RuntimeWarning):
    #--------------------------------------------------------------------------
    # Iteration cap reached before the stopping criterion was met
    #--------------------------------------------------------------------------
    pass


class SolverError(Exception):
    #--------------------------------------------------------------------------
    # LP backend did not report an optimal solution; status kept verbatim and
    # the backend's own message appended when it gives one
    #--------------------------------------------------------------------------
    def __init__(self, status, message=None):
        self.status     = status
        self.message    = message
        text            = 'LP backend returned status {}.'.format(status)
        if message:
            text += ' ' + str(message)
        super().__init__(text)


def get_solver_setup(**overrides):
    #--------------------------------------------------------------------------
    # Default solver configuration. A fresh dict is returned on every call so
    # that callers with different tolerances never share state.
    #--------------------------------------------------------------------------
    solver_conf                                 =   {}
    solver_conf.update({
                'iterations'                    :   1000,
                'epsilon'                       :   1e-3,
                'stop_rule'                     :   'supnorm',
                'parallel'                      :   False,
                'num_cpu_core'                  :   os.cpu_count() or 1,
                'verbose'                       :   False,
                'print_len'                     :   72,
                'prob_tol'                      :   1e-6,
                'binding_tol'                   :   1e-7,
                'solver_name'                   :   None,
                'lp_method'                     :   'highs',
                'feasibility_tol'               :   1e-9,
                'optimality_tol'                :   1e-9,
                'seed'                          :   333,
        })

    for key in overrides:
        if key not in solver_conf:
            raise ConfigurationError('Unknown solver configuration key: ' + str(key))
    solver_conf.update(overrides)
    is_solver_config_valid(solver_conf)
    return solver_conf


def merge_solver_conf(solver_conf=None):
    #--------------------------------------------------------------------------
    # Complete a (possibly partial) caller configuration with the defaults
    #--------------------------------------------------------------------------
    if solver_conf is None:
        return get_solver_setup()
    if not isinstance(solver_conf, dict):
        raise ConfigurationError('Solver configuration must be a dict.')
    return get_solver_setup(**solver_conf)


def is_solver_config_valid(solver_conf):
    #--------------------------------------------------------------------------
    # Reject values no algorithm can work with
    #--------------------------------------------------------------------------
    if not isinstance(solver_conf['iterations'], (int, np.integer)) or solver_conf['iterations'] < 1:
        raise ConfigurationError('Iteration cap must be a positive integer.')
    if not solver_conf['epsilon'] > 0:
        raise ConfigurationError('Convergence tolerance epsilon must be positive.')
    if solver_conf['stop_rule'] not in ['supnorm', 'span']:
        raise ConfigurationError('Stop rule ' + str(solver_conf['stop_rule']) + ' is not implemented!')
    if not isinstance(solver_conf['num_cpu_core'], (int, np.integer)) or solver_conf['num_cpu_core'] < 1:
        raise ConfigurationError('Number of CPU cores must be a positive integer.')


def sup_norm(x):
    return float(np.max(np.abs(x))) if len(x) > 0 else 0.0


def span_seminorm(x):
    #--------------------------------------------------------------------------
    # max_s x(s) - min_s x(s)
    #--------------------------------------------------------------------------
    return float(np.max(x) - np.min(x)) if len(x) > 0 else 0.0


def make_text_bold(string):
    #--------------------------------------------------------------------------
    # Makes a text bold in terminal
    #--------------------------------------------------------------------------
    return '{}{}{}'.format('\033[1m', string, '\033[0m')


class solver_output_handler:
    #--------------------------------------------------------------------------
    # Collects per-iteration diagnostics of an algorithm and, if requested,
    # prints them as a table.
    #--------------------------------------------------------------------------

    def __init__(self, algorithm_name, column_names, solver_conf):
        #----------------------------------------------------------------------
        # Inititalization
        #----------------------------------------------------------------------
        self.algorithm_name                     = algorithm_name
        self.column_names                       = list(column_names)
        self.verbose                            = solver_conf['verbose']
        self.print_len                          = solver_conf['print_len']
        self.rows                               = []
        self.start_time                         = time.time()

    def print_algorithm_instance_info(self, model, objective):
        #----------------------------------------------------------------------
        # Print to users some info
        #----------------------------------------------------------------------
        if not self.verbose:
            return
        print('\n')
        print('='*self.print_len)
        print('Algorithm name:              \t'     + make_text_bold(self.algorithm_name))
        print('Objective:                   \t'     + make_text_bold(str(objective)))
        print('Number of states:            \t'     + make_text_bold(str(model.state_count())))
        print('='*self.print_len)
        print('| {:>8s} | {:>20s} | {:>10s} |'.format(*(['Iter'] + self.column_names[1:2] + ['T(s)'])))
        print('-'*self.print_len)

    def append_to_outputs(self, iteration: int, value: float):
        #----------------------------------------------------------------------
        # Record one iteration; value is the residual or the number of
        # changed actions, depending on the algorithm
        #----------------------------------------------------------------------
        runtime = time.time() - self.start_time
        self.rows.append({
                self.column_names[0]            :   iteration,
                self.column_names[1]            :   value,
                'runtime'                       :   runtime,
        })
        if self.verbose:
            print('| {:>8d} | {:>20.6f} | {:>10.4f} |'.format(iteration, float(value), runtime))

    def close(self, converged):
        if self.verbose:
            print('-'*self.print_len)
            print('Converged:                   \t' + make_text_bold(str(converged)))

    def get_output_table(self):
        return pd.DataFrame(self.rows, columns=self.column_names[:2] + ['runtime'])
