# This file is part of epicycle,  distributed under license LGPL v3

''' Velocity solver for planetary gear trains.

	Every mesh between two gears `i` and `j` on a carrier `c` gives the fundamental relation of epicyclic trains: the speeds relative to the carrier are inversely proportional to the tooth counts, with opposite directions for an external mesh and the same direction for an internal mesh

	.. math::
		N_i (\\omega_i - \\omega_c) + \\sigma N_j (\\omega_j - \\omega_c) = 0

	Together with the known speeds and couplings, these relations form a linear system over the velocity variables. Its rank tells whether the train is fully defined, lacks constraints or has conflicting ones.

	Example:

		>>> result = solve(model)
		>>> if result.underdetermined:
		...		print('add', result.missing, 'constraints')
		>>> elif result.overdetermined:
		...		print('remove', result.conflicting, 'constraints')
		>>> else:
		...		result.velocities[Var('carrier', 1)]
		2.5
'''

import logging
from dataclasses import dataclass, field
from math import nan

import numpy as np
import scipy.linalg

from .model import Model, Known, Equal, Lock, ModelError
from .messages import Message
from .linalg import rank, lstsq, augment
from . import settings

__all__ = ['solve', 'equations', 'Equation', 'Solution', 'Underdetermined', 'Overdetermined']

logger = logging.getLogger(__name__)


@dataclass
class Equation:
	''' one row of the linear system `coefs @ ω = value`, `tag` is a readable origin of the row '''
	coefs: np.ndarray
	value: float
	tag: str


@dataclass
class Solution:
	''' Result of a fully determined system

		Attributes:
			variables:	the velocity variables, in the order of the system columns
			velocities:	`{var: rpm}`
			ratios:		`{ratio id: value}`, nan when the denominator is null
			equations:	the rows of the system that has been solved
	'''
	variables: list
	velocities: dict
	ratios: dict = field(default_factory=dict)
	equations: list = field(default_factory=list)

	underdetermined = False
	overdetermined = False

	@property
	def message(self):	return None

@dataclass
class Underdetermined:
	''' Result of a system lacking constraints

		Attributes:
			missing:		number of known speeds or couplings to add
			undetermined:	variables that the current constraints leave free
	'''
	missing: int
	undetermined: list = field(default_factory=list)
	equations: list = field(default_factory=list)

	underdetermined = True
	overdetermined = False

	@property
	def message(self) -> Message:
		return Message('underdetermined', {
			'count': self.missing,
			'what': Message('constraint_one' if self.missing == 1 else 'constraint_many'),
			})

@dataclass
class Overdetermined:
	''' Result of an inconsistent system

		Attributes:
			conflicting:	estimated number of constraints to remove, this is an upper bound rather than an exact diagnosis
	'''
	conflicting: int
	equations: list = field(default_factory=list)

	underdetermined = False
	overdetermined = True

	@property
	def message(self) -> Message:
		return Message('overdetermined', {
			'count': self.conflicting,
			'what': Message('known_constraint_one' if self.conflicting == 1 else 'known_constraint_many'),
			})


def equations(model: Model, index: dict) -> list:
	''' Emit the rows of the linear system of the given model

		Parameters:
			model:	the model to convert
			index:	`{var: column}` for each variable of the model
	'''
	n = len(index)
	def column(var, what):
		if var not in index:
			raise ModelError('{} {} is not a variable of the model'.format(what, var))
		return index[var]

	rows = []
	for mesh in model.meshes:
		ni = model.teeth(mesh.i)
		nj = model.teeth(mesh.j)
		sign = mesh.factor
		row = np.zeros(n)
		row[column(mesh.i, 'gear')] += ni
		row[column(mesh.carrier, 'carrier')] -= ni
		row[column(mesh.j, 'gear')] += sign*nj
		row[column(mesh.carrier, 'carrier')] -= sign*nj
		rows.append(Equation(row, 0., 'mesh({},{}|{})'.format(mesh.i, mesh.j, mesh.carrier)))

	for constraint in model.constraints:
		row = np.zeros(n)
		if isinstance(constraint, Known):
			row[index[constraint.var]] = 1
			rows.append(Equation(row, float(constraint.value), 'known({})'.format(constraint.var)))
		elif isinstance(constraint, Equal):
			row[index[constraint.a]] = 1
			row[index[constraint.b]] -= 1
			rows.append(Equation(row, 0., 'equal({}={})'.format(constraint.a, constraint.b)))
		elif isinstance(constraint, Lock):
			row[index[constraint.var]] = 1
			rows.append(Equation(row, 0., 'lock({})'.format(constraint.var)))
		else:
			raise ModelError('unknown constraint type: {}'.format(type(constraint).__name__))
	return rows


def solve(model: Model):
	''' Solve the velocities of all the variables of the model

		Return:
			- `Solution` when the system has one solution
			- `Underdetermined` when constraints are missing
			- `Overdetermined` when constraints are conflicting

		Raise:
			`ModelError` when the model is structurally wrong (mesh on a missing element, missing tooth count)
	'''
	variables = model.variables()
	index = {var: i  for i, var in enumerate(variables)}
	rows = equations(model, index)
	n, m = len(variables), len(rows)
	if n == 0:
		return Solution([], {}, {}, rows)

	a = np.array([row.coefs for row in rows]).reshape(m, n)
	b = np.array([row.value for row in rows])
	rank_a = rank(a)
	rank_ab = rank(augment(a, b))
	logger.debug('system of %d equations over %d variables, rank %d, augmented rank %d', m, n, rank_a, rank_ab)

	if rank_ab > rank_a:
		conflicting = max(1, rank_ab - rank_a, m - n)
		logger.debug('overdetermined system, %d conflicting constraints', conflicting)
		return Overdetermined(conflicting, rows)

	if rank_a < n:
		missing = n - rank_a
		logger.debug('underdetermined system, %d missing constraints', missing)
		return Underdetermined(missing, free_variables(a, variables), rows)

	x = lstsq(a, b)
	velocities = {var: float(x[i])  for i, var in enumerate(variables)}

	ratios = {}
	for ratio in model.ratios:
		if ratio.num not in velocities or ratio.den not in velocities:
			raise ModelError('ratio {} references a variable not in the model'.format(ratio.id))
		den = velocities[ratio.den]
		ratios[ratio.id] = nan if abs(den) < settings.solver['ratio_tolerance'] else velocities[ratio.num] / den

	return Solution(variables, velocities, ratios, rows)


def free_variables(a, variables) -> list:
	''' Variables that can still move when all the rows of `a` are satisfied, ie. with a component in the null space of `a` '''
	if a.size == 0:
		return list(variables)
	kernel = scipy.linalg.null_space(a, rcond=settings.solver['pivot_tolerance'])
	if kernel.size == 0:
		return []
	amplitude = np.abs(kernel).max(axis=1)
	return [var  for var, amp in zip(variables, amplitude)  if amp > settings.solver['null_tolerance']]
