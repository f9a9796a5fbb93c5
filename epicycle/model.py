# This file is part of epicycle,  distributed under license LGPL v3

''' Definition of the kinematic model of a planetary gear train.

	A model is a plain value: a list of rotating elements, the meshes between them, the constraints on their velocities and the ratios to report. It is rebuilt from the stage descriptions every time they change, the library never modifies it.

	Velocity variables can be any hashable object. Models built from stages use `Var` records, which carry the role of the variable explicitly, so nothing has to be deduced from variable names.

	Example:

		>>> s, p, a, b = Var('sun', 1), Var('planet', 1, 1), Var('ring', 1), Var('carrier', 1)
		>>> model = Model(
		...		elements=[
		...			Element('sun1', 'sun', 20, s),
		...			Element('p1_1', 'planet', 20, p),
		...			Element('ring1', 'ring', 60, a),
		...			Element('arm1', 'carrier', None, b),
		...			],
		...		meshes=[
		...			Mesh(s, p, b, 'external'),
		...			Mesh(p, a, b, 'internal'),
		...			],
		...		constraints=[Known(s, 10), Lock(a)],
		...		)
'''

import math
import numbers
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

__all__ = [
	'Var', 'Element', 'Mesh', 'Known', 'Equal', 'Lock', 'Ratio', 'Model', 'ModelError',
	'ROLES', 'KINDS',
	]


class ModelError(Exception):
	''' raised when a model is structurally wrong: a mesh references a missing element, an element lacks its tooth count, ... '''
	pass


ROLES = ('sun', 'planet', 'ring', 'carrier')
KINDS = {'external': +1, 'internal': -1}

# prefix of the display name of each role
_prefixes = {'sun': 's', 'planet': 'p', 'ring': 'a', 'carrier': 'b'}


class Var(NamedTuple):
	''' Angular velocity variable of a stage member

		Attributes:
			role:	one of `ROLES`
			stage:	id of the stage the member belongs to
			planet:	1-based index of the planet in its chain, None for other roles
	'''
	role: str
	stage: int
	planet: Optional[int] = None

	def __str__(self):
		if self.role == 'planet':
			return 'omega_p{}_{}'.format(self.stage, self.planet)
		return 'omega_{}{}'.format(_prefixes[self.role], self.stage)


@dataclass(frozen=True)
class Element:
	''' A rotating body

		Attributes:
			id:		identifier of the body
			kind:	one of `ROLES`
			teeth:	number of teeth, None for a carrier
			var:	its angular velocity variable
	'''
	id: str
	kind: str
	teeth: Optional[int]
	var: object


@dataclass(frozen=True)
class Mesh:
	''' An engagement between two gears rotating relative to a carrier

		Either `kind` or `sign` must be given, `sign` has priority when both are.

		Attributes:
			i, j:		velocity variables of the two gears
			carrier:	velocity variable of the carrier holding them
			kind:		'external' (convex to convex, eg. sun-planet) or 'internal' (convex to concave, eg. planet-ring)
			sign:		+1 for external or -1 for internal
	'''
	i: object
	j: object
	carrier: object
	kind: Optional[str] = 'external'
	sign: Optional[float] = None

	@property
	def factor(self) -> float:
		''' sign factor of the second gear in the mesh equation '''
		if self.sign is not None:
			return self.sign
		if self.kind not in KINDS:
			raise ModelError('unknown mesh kind: {}'.format(repr(self.kind)))
		return KINDS[self.kind]


@dataclass(frozen=True)
class Known:
	''' pins a velocity to a value (rpm) '''
	var: object
	value: float

	def variables(self):	return (self.var,)

@dataclass(frozen=True)
class Equal:
	''' ties two velocities, used to couple members of different stages '''
	a: object
	b: object

	def variables(self):	return (self.a, self.b)

@dataclass(frozen=True)
class Lock:
	''' pins a velocity to zero '''
	var: object

	@property
	def value(self):	return 0.

	def variables(self):	return (self.var,)


@dataclass(frozen=True)
class Ratio:
	''' request for the ratio `num/den` of two velocities once solved '''
	id: str
	num: object
	den: object


@dataclass(frozen=True)
class Model:
	''' Aggregate of elements, meshes, constraints and ratio requests for one evaluation

		Attributes:
			elements:		list of `Element`
			meshes:			list of `Mesh`
			constraints:	list of `Known`, `Equal`, `Lock`
			ratios:			list of `Ratio`
			carriers:		additional carrier velocity variables, for carriers not declared as elements
	'''
	elements: list = field(default_factory=list)
	meshes: list = field(default_factory=list)
	constraints: list = field(default_factory=list)
	ratios: list = field(default_factory=list)
	carriers: list = field(default_factory=list)

	def element(self, var) -> Element:
		''' the element whose velocity variable is `var` '''
		for element in self.elements:
			if element.var == var:
				return element
		raise ModelError('element not found for {}'.format(var))

	def teeth(self, var) -> int:
		''' tooth count of the element whose velocity variable is `var`, any positive whole number is accepted (`20`, `20.0`, `numpy.int64(20)`) '''
		element = self.element(var)
		z = element.teeth
		if z is None or isinstance(z, bool) or not isinstance(z, numbers.Real):
			raise ModelError('element {} has no tooth count'.format(var))
		if not (isinstance(z, numbers.Integral) or (math.isfinite(z) and z == int(z))) or z <= 0:
			raise ModelError('tooth count of element {} must be a positive integer, got {}'.format(var, z))
		return int(z)

	def variables(self) -> list:
		''' distinct velocity variables of the model, in order of first appearance '''
		found = {}
		for element in self.elements:
			found.setdefault(element.var, None)
		for carrier in self.carriers:
			found.setdefault(carrier, None)
		for constraint in self.constraints:
			for var in constraint.variables():
				found.setdefault(var, None)
		return list(found)
